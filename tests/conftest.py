"""
Pytest configuration and shared fixtures for letter extractor tests
"""
import pytest
from hypothesis import settings

from letter_extractor.models import PdfUpload
from letter_extractor.text_extractor import TextAcquirer

# Configure Hypothesis profiles
settings.register_profile("ci", max_examples=100, deadline=None)
settings.register_profile("dev", max_examples=50, deadline=None)
settings.load_profile("dev")


SAMPLE_LETTER = """PEMERINTAH PROVINSI SUMATERA SELATAN
DINAS KEARSIPAN
Jalan Demang Lebar Daun No. 4 Palembang Telepon (0711) 123456
Palembang, 5 Januari 2024
Nomor : 045.4/123/DK/2024
Sifat : Biasa
Lampiran : 1 (satu) berkas
Hal : Permohonan Data Arsip
Kepada Yth. Kepala Badan Pusat Statistik
di
Palembang

Dengan hormat, sehubungan dengan kegiatan penataan arsip, kami mohon bantuan data arsip statis tahun 2020.

Data tersebut akan digunakan untuk keperluan penyusunan laporan tahunan.

Demikian surat ini kami sampaikan, atas perhatiannya diucapkan terima kasih.

Plt Kepala Dinas Kearsipan
Provinsi Sumatera Selatan
BUDI SANTOSO
Pembina IV/a
NIP. 196501011990031001
"""


class FakeImage:
    """Stand-in for a rendered page image"""

    def __init__(self, index):
        self.index = index
        self.closed = False

    def close(self):
        self.closed = True


class FakePageSource:
    """Page source serving fixed embedded texts"""

    def __init__(self, pages, render_error=None):
        self.pages = list(pages)
        self.render_error = render_error
        self.rendered = []
        self.closed = False

    @property
    def page_count(self):
        return len(self.pages)

    def embedded_text(self, index):
        return self.pages[index]

    def render(self, index, scale):
        if self.render_error is not None:
            raise self.render_error
        image = FakeImage(index)
        self.rendered.append(image)
        return image

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


class FakeOCR:
    """OCR engine returning canned text per page index"""

    def __init__(self, texts=None, error=None):
        self.texts = texts or {}
        self.error = error
        self.calls = []

    def recognize(self, image, languages=None):
        self.calls.append((getattr(image, 'index', None), languages))
        if self.error is not None:
            raise self.error
        return self.texts.get(getattr(image, 'index', None), "")


@pytest.fixture
def sample_letter_text():
    """Full letter as embedded text of a single page"""
    return SAMPLE_LETTER


@pytest.fixture
def pdf_upload():
    """Minimal upload accepted by validation"""
    return PdfUpload(filename="surat.pdf", content=b"%PDF-1.4 test", content_type="application/pdf")


@pytest.fixture
def make_source():
    """Factory for fake page sources"""
    return FakePageSource


@pytest.fixture
def make_ocr():
    """Factory for fake OCR engines"""
    return FakeOCR


@pytest.fixture
def make_acquirer():
    """Build a TextAcquirer over fixed page texts and a fake OCR engine"""
    def _make(pages, ocr=None, render_error=None, **kwargs):
        sources = []

        def factory(pdf_bytes):
            source = FakePageSource(pages, render_error=render_error)
            sources.append(source)
            return source

        acquirer = TextAcquirer(ocr_engine=ocr or FakeOCR(), source_factory=factory, **kwargs)
        acquirer.opened_sources = sources
        return acquirer
    return _make
