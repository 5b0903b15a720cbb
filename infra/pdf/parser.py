import asyncio
import io
import logging
import re
from typing import Optional

import httpx
import pdfplumber

from domain.errors import CvFetchError, CvParseError

logger = logging.getLogger(__name__)

DEFAULT_FETCH_TIMEOUT = 10.0
_NEWLINE_RUNS = re.compile(r"[\r\n]+")


def parse_pdf_text(data: bytes) -> str:
    text_parts = []
    try:
        with pdfplumber.open(io.BytesIO(data)) as pdf:
            for page in pdf.pages:
                t = page.extract_text() or ""
                text_parts.append(t)
    except Exception as exc:
        raise CvParseError(f"could not parse CV PDF: {exc}") from exc
    return _NEWLINE_RUNS.sub(" ", "\n".join(text_parts)).strip()


async def _download(url: str, client: httpx.AsyncClient, timeout: float) -> bytes:
    try:
        response = await client.get(url, timeout=timeout, follow_redirects=True)
    except httpx.TimeoutException as exc:
        raise CvFetchError(f"timed out fetching CV after {timeout}s") from exc
    except httpx.RequestError as exc:
        raise CvFetchError(f"could not fetch CV: {exc}") from exc
    except httpx.InvalidURL as exc:
        raise CvFetchError(f"invalid CV URL: {exc}") from exc
    if not response.is_success:
        raise CvFetchError(
            f"Failed to fetch CV: {response.status_code} {response.reason_phrase}")
    return response.content


async def fetch_cv_text(
    url: str,
    client: Optional[httpx.AsyncClient] = None,
    timeout: float = DEFAULT_FETCH_TIMEOUT,
) -> str:
    """Download the PDF at ``url`` and return its text on a single line.

    Raises ``CvFetchError`` on transport failures or non-2xx responses and
    ``CvParseError`` when the body is not a readable PDF. Callers are expected
    to recover from both.
    """
    if not url or not url.strip():
        raise CvFetchError("missing CV URL")

    if client is None:
        async with httpx.AsyncClient() as own_client:
            data = await _download(url, own_client, timeout)
    else:
        data = await _download(url, client, timeout)

    logger.debug("Fetched CV %s (%d bytes)", url, len(data))
    return await asyncio.to_thread(parse_pdf_text, data)
