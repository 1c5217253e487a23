import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from ..exceptions import FetchError
from ..settings import settings

logger = logging.getLogger("recipebox.http")


def browser_headers() -> dict:
    """Headers of a desktop browser; plenty of recipe sites refuse anything else."""
    return {
        "User-Agent": settings.user_agent,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.5",
        "Cache-Control": "no-cache",
        "Pragma": "no-cache",
    }


@dataclass
class RawPage:
    url: str
    status: int
    content_type: str
    text: str


class PageFetcher:
    """GET one page. Non-2xx and transport errors become FetchError; nothing is retried."""

    def __init__(
        self,
        timeout: Optional[float] = None,
        max_chars: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout or settings.http_timeout_seconds
        self.max_chars = max_chars or settings.max_page_chars
        self.transport = transport

    async def fetch(self, url: str) -> RawPage:
        logger.info(f"Fetching {url}")
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                headers=browser_headers(),
                transport=self.transport,
            ) as client:
                response = await client.get(url)
        except httpx.HTTPError as e:
            logger.error(f"Fetch failed for {url}: {e.__class__.__name__}: {e}")
            raise FetchError(None, str(e) or e.__class__.__name__) from e

        if not response.is_success:
            logger.error(f"Fetch failed for {url}: {response.status_code} {response.reason_phrase}")
            raise FetchError(response.status_code, response.reason_phrase)

        text = response.text
        if len(text) > self.max_chars:
            logger.warning(f"Page too large ({len(text)} chars), truncating to {self.max_chars}")
            text = text[:self.max_chars]

        logger.info(f"Fetched {url}: status={response.status_code} length={len(text)}")
        return RawPage(
            url=str(response.url),
            status=response.status_code,
            content_type=response.headers.get("content-type", ""),
            text=text,
        )
