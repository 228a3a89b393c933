"""Data structures passed between pipeline stages"""
import mimetypes
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class PdfUpload:
    """A PDF file handed to the pipeline: name, bytes and MIME type"""
    filename: str
    content: bytes
    content_type: str = "application/pdf"

    @property
    def size(self) -> int:
        return len(self.content)

    @classmethod
    def from_path(cls, path) -> "PdfUpload":
        path = Path(path)
        content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        return cls(filename=path.name, content=path.read_bytes(), content_type=content_type)

    def __repr__(self):
        return f"PdfUpload(filename='{self.filename}', size={self.size}, content_type='{self.content_type}')"


@dataclass
class RawPage:
    """Text recovered from one page and the path that produced it"""
    index: int
    embedded_text: str = ""
    text: str = ""
    source: str = "embedded"  # "embedded", "ocr" or "failed"

    @property
    def used_ocr(self) -> bool:
        return self.source == "ocr"


@dataclass(frozen=True)
class AcquiredDocument:
    """Page texts of one document in page order"""
    pages: Tuple[RawPage, ...] = ()

    @property
    def page_texts(self) -> List[str]:
        return [page.text for page in self.pages]

    @property
    def text(self) -> str:
        return "\n\n".join(self.page_texts)

    @property
    def failed_pages(self) -> List[int]:
        return [page.index for page in self.pages if page.source == "failed"]


@dataclass(frozen=True)
class FieldMatch:
    """One rule's capture for a field, with its competition score"""
    field: str
    value: str
    score: int
    start: int
    end: int
    rule: int = 0
    groups: Tuple[Optional[str], ...] = ()


@dataclass
class ExtractedLetter:
    """Structured fields recovered from an official letter"""
    date: str = ""
    reference_number: str = ""
    sensitivity: str = ""
    attachment: str = ""
    subject: str = ""
    addressee: str = ""
    addressee_locality: str = ""
    body: List[str] = field(default_factory=list)
    closing: str = ""
    office_title: str = ""
    signer_name: str = ""
    signer_rank: str = ""
    signer_id: str = ""
    verification_url: str = ""  # filled in later by the archive application
    warnings: List[str] = field(default_factory=list)

    @property
    def has_header_fields(self) -> bool:
        return bool(self.reference_number or self.subject or self.date)

    def to_dict(self) -> Dict:
        return asdict(self)

    def to_form_fields(self) -> Dict:
        """Map onto the archive form's field names"""
        return {
            "tanggal": self.date,
            "nomor": self.reference_number,
            "sifat": self.sensitivity,
            "lampiran": self.attachment,
            "hal": self.subject,
            "kepada": self.addressee,
            "di": self.addressee_locality,
            "isi": list(self.body) if self.body else [""],
            "penutup": self.closing,
            "ttdJabatan": self.office_title,
            "ttdNama": self.signer_name,
            "ttdPangkat": self.signer_rank,
            "ttdNip": self.signer_id,
            "qrUrl": self.verification_url,
        }


@dataclass(frozen=True)
class LetterSummary:
    """Reduced two-field result used by the archive intake form"""
    classification_code: str = ""
    subject: str = ""
    document_date: str = ""  # ISO YYYY-MM-DD
    suggested_start_date: str = ""
    formatted_date: str = ""

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass
class SignatureBlock:
    """Signer details parsed from the end of a letter"""
    office_title: str = ""
    name: str = ""
    rank: str = ""
    employee_id: str = ""


@dataclass
class BodySegments:
    """Body paragraphs, closing statement and the remaining signature text"""
    paragraphs: List[str] = field(default_factory=list)
    closing: str = ""
    signature_text: str = ""
