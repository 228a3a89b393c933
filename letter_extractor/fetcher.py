"""Download of remote PDFs into PdfUpload objects"""
import logging
from typing import Optional
from urllib.parse import urlsplit

import httpx

from .config import DEFAULT_FETCHED_FILENAME, FETCH_TIMEOUT_SECONDS
from .errors import FetchError
from .models import PdfUpload

logger = logging.getLogger(__name__)


def filename_from_url(url: str) -> str:
    """Last path segment of the URL, query string excluded"""
    name = urlsplit(url).path.rstrip('/').split('/')[-1]
    return name or DEFAULT_FETCHED_FILENAME


async def fetch_pdf_from_url(url: str,
                             client: Optional[httpx.AsyncClient] = None,
                             timeout: float = FETCH_TIMEOUT_SECONDS) -> PdfUpload:
    """
    Fetch a PDF over HTTP and wrap it as an upload

    Args:
        url: Location of the PDF
        client: Optional shared client (a temporary one is used otherwise)
        timeout: Request timeout in seconds

    Returns:
        PdfUpload with the response body

    Raises:
        FetchError: when the request fails or returns a non-success status
    """
    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(timeout=timeout, follow_redirects=True)
    try:
        response = await client.get(url)
    except httpx.HTTPError as e:
        logger.error(f"Failed to fetch PDF from {url}: {e}")
        raise FetchError(f"Failed to fetch PDF from URL: {e}") from e
    finally:
        if owns_client:
            await client.aclose()

    if not response.is_success:
        logger.error(f"Fetching {url} returned HTTP {response.status_code}")
        raise FetchError(f"Failed to fetch PDF from URL (HTTP {response.status_code})")

    content_type = response.headers.get("content-type", "").split(";")[0].strip()
    return PdfUpload(
        filename=filename_from_url(url),
        content=response.content,
        content_type=content_type or "application/pdf",
    )
