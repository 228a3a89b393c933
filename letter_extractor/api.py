"""FastAPI interface for letter extraction"""
from fastapi import FastAPI, HTTPException, Request, UploadFile, File
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from typing import Dict
import logging
from .errors import FetchError, InsufficientTextError, InvalidInputError, LetterExtractionError
from .extractor import LetterExtractor
from .models import PdfUpload
from .ocr_engine import TesseractEngine
from .summary_extractor import SummaryExtractor

logger = logging.getLogger(__name__)

app = FastAPI(title="Letter Extractor API", version="0.1.0")


class UrlExtractionRequest(BaseModel):
    """Extraction request for a PDF stored at a URL"""
    url: str
    form_fields: bool = False


# Initialize extractors
extractor = None
summary_extractor = None


@app.on_event("startup")
async def startup_event():
    """Initialize extractors on startup"""
    global extractor, summary_extractor
    try:
        extractor = LetterExtractor()
        summary_extractor = SummaryExtractor()
    except Exception as e:
        logger.warning(f"Failed to initialize extractor: {e}")


ERROR_STATUS = {
    InvalidInputError: 400,
    InsufficientTextError: 422,
    FetchError: 502,
}


@app.exception_handler(LetterExtractionError)
async def extraction_error_handler(request: Request, exc: LetterExtractionError):
    status_code = next(
        (status for error_type, status in ERROR_STATUS.items() if isinstance(exc, error_type)),
        500,
    )
    return JSONResponse(status_code=status_code, content={"success": False, "error": str(exc)})


async def _read_upload(pdf_file: UploadFile) -> PdfUpload:
    content = await pdf_file.read()
    return PdfUpload(
        filename=pdf_file.filename or "upload.pdf",
        content=content,
        content_type=pdf_file.content_type or "application/octet-stream",
    )


@app.post("/extract-upload")
async def extract_from_upload(pdf_file: UploadFile = File(...), form_fields: bool = False):
    """
    Extract letter fields from an uploaded PDF file.

    Accepts:
    - pdf_file: Uploaded PDF file
    - form_fields: Return the archive form field names instead of the record names

    Returns extraction result.
    """
    if extractor is None:
        raise HTTPException(status_code=500, detail="Extractor not initialized")

    upload = await _read_upload(pdf_file)
    letter = await extractor.extract(upload)

    return {
        "filename": upload.filename,
        "extracted_data": letter.to_form_fields() if form_fields else letter.to_dict(),
        "warnings": letter.warnings,
        "success": True,
        "error": None,
    }


@app.post("/extract-url")
async def extract_from_url(request: UrlExtractionRequest):
    """
    Extract letter fields from a PDF stored at a URL.

    Returns extraction result.
    """
    if extractor is None:
        raise HTTPException(status_code=500, detail="Extractor not initialized")

    letter = await extractor.extract_from_url(request.url)

    return {
        "url": request.url,
        "extracted_data": letter.to_form_fields() if request.form_fields else letter.to_dict(),
        "warnings": letter.warnings,
        "success": True,
        "error": None,
    }


@app.post("/summary-upload")
async def summary_from_upload(pdf_file: UploadFile = File(...)) -> Dict:
    """
    Extract subject, letter date and classification code from an uploaded PDF.

    Repeated uploads of the same file are answered from the cache.
    """
    if summary_extractor is None:
        raise HTTPException(status_code=500, detail="Extractor not initialized")

    upload = await _read_upload(pdf_file)
    summary = await summary_extractor.extract(upload)

    return {
        "filename": upload.filename,
        "extracted_data": summary.to_dict(),
        "success": True,
        "error": None,
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "extractor_initialized": extractor is not None,
        "ocr_available": TesseractEngine().is_available(),
        "summary_cache_entries": len(summary_extractor.cache) if summary_extractor is not None else 0,
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
