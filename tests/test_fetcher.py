"""Tests for fetching PDFs over HTTP"""
import httpx
import pytest

from letter_extractor.errors import FetchError
from letter_extractor.extractor import LetterExtractor
from letter_extractor.fetcher import fetch_pdf_from_url, filename_from_url


def make_client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def test_filename_from_url():
    assert filename_from_url("https://arsip.example.go.id/files/surat%20masuk.pdf?token=1") == "surat%20masuk.pdf"
    assert filename_from_url("https://arsip.example.go.id/") == "arsip.pdf"


@pytest.mark.asyncio
async def test_fetch_success():
    def handler(request):
        return httpx.Response(200, content=b"%PDF-1.4 data", headers={"content-type": "application/pdf"})

    async with make_client(handler) as client:
        upload = await fetch_pdf_from_url("https://example.test/docs/surat.pdf", client=client)
    assert upload.filename == "surat.pdf"
    assert upload.content == b"%PDF-1.4 data"
    assert upload.content_type == "application/pdf"


@pytest.mark.asyncio
async def test_fetch_defaults_content_type():
    async with make_client(lambda request: httpx.Response(200, content=b"%PDF")) as client:
        upload = await fetch_pdf_from_url("https://example.test/surat.pdf", client=client)
    assert upload.content_type == "application/pdf"


@pytest.mark.asyncio
async def test_fetch_http_error_status():
    async with make_client(lambda request: httpx.Response(404)) as client:
        with pytest.raises(FetchError, match="404"):
            await fetch_pdf_from_url("https://example.test/hilang.pdf", client=client)


@pytest.mark.asyncio
async def test_fetch_transport_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with make_client(handler) as client:
        with pytest.raises(FetchError):
            await fetch_pdf_from_url("https://example.test/surat.pdf", client=client)


@pytest.mark.asyncio
async def test_extract_from_url(make_acquirer, sample_letter_text):
    extractor = LetterExtractor(text_acquirer=make_acquirer([sample_letter_text]))
    handler = lambda request: httpx.Response(200, content=b"%PDF-1.4", headers={"content-type": "application/pdf"})
    async with make_client(handler) as client:
        letter = await extractor.extract_from_url("https://example.test/surat.pdf", client=client)
    assert letter.reference_number == "045.4/123/DK/2024"
