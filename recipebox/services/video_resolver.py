"""
Hosted video (YouTube) metadata as substitute page text.

Every lookup here is best effort: a failure anywhere means "no video
text" and the pipeline carries on with the fetched page instead.
"""
import re
import json
import logging
from dataclasses import dataclass
from typing import Optional

import httpx
from bs4 import BeautifulSoup

from ..infra.http_client import browser_headers
from ..parsing.structured_data import iter_json_ld_nodes
from ..settings import settings

logger = logging.getLogger("recipebox.video")

VIDEO_URL_PATTERN = re.compile(
    r"(?:https?://)?(?:www\.|m\.|music\.)?"
    r"(?:youtube\.com/(?:watch\?(?:.*&)?v=|shorts/|embed/|live/|v/)"
    r"|youtube-nocookie\.com/embed/"
    r"|youtu\.be/)"
    r"(?P<id>[A-Za-z0-9_-]{11})",
    re.IGNORECASE,
)

DATA_API_URL = "https://www.googleapis.com/youtube/v3/videos"
OEMBED_URL = "https://www.youtube.com/oembed"
WATCH_URL = "https://www.youtube.com/watch?v={video_id}"

THUMBNAIL_PREFERENCE = ("maxres", "high", "medium", "default")

SHORT_DESCRIPTION_RE = re.compile(r'"shortDescription"\s*:\s*"((?:[^"\\]|\\.)*)"')


def extract_video_id(url: str) -> Optional[str]:
    if not url:
        return None
    m = VIDEO_URL_PATTERN.search(url)
    return m.group("id") if m else None


def is_video_url(url: str) -> bool:
    return extract_video_id(url) is not None


def is_short_form(url: str) -> bool:
    return "/shorts/" in (url or "").lower()


@dataclass
class VideoMetadata:
    video_id: str
    title: Optional[str] = None
    description: Optional[str] = None
    thumbnail: Optional[str] = None

    @property
    def text(self) -> str:
        """Title and description as one block for the parsers."""
        parts = [p.strip() for p in (self.title, self.description) if p and p.strip()]
        return "\n\n".join(parts)


class VideoSourceResolver:
    def __init__(
        self,
        api_key: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.youtube_api_key
        self.transport = transport
        self.timeout = timeout or settings.http_timeout_seconds

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            headers=browser_headers(),
            transport=self.transport,
        )

    async def resolve(self, url: str) -> Optional[VideoMetadata]:
        """
        Returns metadata with whatever could be found, or None for
        non-video URLs and videos where every lookup came back empty.
        """
        video_id = extract_video_id(url)
        if not video_id:
            return None

        min_chars = (
            settings.video_min_shorts_description_chars if is_short_form(url)
            else settings.video_min_description_chars
        )
        meta = VideoMetadata(video_id=video_id)

        if self.api_key:
            api_meta = await self._fetch_data_api(video_id)
            if api_meta:
                meta = api_meta

        if not meta.title or not meta.thumbnail:
            oembed = await self._fetch_oembed(video_id)
            if oembed:
                meta.title = meta.title or oembed.get("title")
                meta.thumbnail = meta.thumbnail or oembed.get("thumbnail_url")

        if len((meta.description or "").strip()) < min_chars:
            page_description, watch_title = await self._fetch_watch_page(video_id, min_chars)
            if page_description and len(page_description) > len(meta.description or ""):
                meta.description = page_description
            meta.title = meta.title or watch_title

        if not meta.title and not meta.description:
            logger.info(f"No metadata found for video {video_id}")
            return None

        logger.info(
            f"Resolved video {video_id}: title={meta.title!r} "
            f"description_chars={len(meta.description or '')}"
        )
        return meta

    async def _fetch_data_api(self, video_id: str) -> Optional[VideoMetadata]:
        params = {"id": video_id, "part": "snippet", "key": self.api_key}
        try:
            async with self._client() as client:
                response = await client.get(DATA_API_URL, params=params)
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Video data API lookup failed for {video_id}: {e}")
            return None

        items = (data.get("items") or []) if isinstance(data, dict) else []
        if not items:
            return None
        snippet = items[0].get("snippet") or {}
        thumbnails = snippet.get("thumbnails") or {}
        thumbnail = None
        for key in THUMBNAIL_PREFERENCE:
            if thumbnails.get(key, {}).get("url"):
                thumbnail = thumbnails[key]["url"]
                break

        return VideoMetadata(
            video_id=video_id,
            title=snippet.get("title"),
            description=snippet.get("description"),
            thumbnail=thumbnail,
        )

    async def _fetch_oembed(self, video_id: str) -> Optional[dict]:
        params = {"url": WATCH_URL.format(video_id=video_id), "format": "json"}
        try:
            async with self._client() as client:
                response = await client.get(OEMBED_URL, params=params)
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"oEmbed lookup failed for {video_id}: {e}")
            return None
        return data if isinstance(data, dict) else None

    async def _fetch_watch_page(self, video_id: str, min_chars: int):
        """
        Scrape the watch page for a description.
        Returns (description, title); either may be None.
        """
        try:
            async with self._client() as client:
                response = await client.get(WATCH_URL.format(video_id=video_id))
                response.raise_for_status()
                html = response.text
        except httpx.HTTPError as e:
            logger.warning(f"Watch page lookup failed for {video_id}: {e}")
            return None, None

        return pick_page_description(html, min_chars), page_title(html)


def page_title(html: str) -> Optional[str]:
    soup = BeautifulSoup(html, "html.parser")
    og = soup.find("meta", attrs={"property": "og:title"})
    if og and og.get("content"):
        return og["content"].strip()
    if soup.title and soup.title.string:
        return re.sub(r"\s*-\s*YouTube\s*$", "", soup.title.string.strip()) or None
    return None


def pick_page_description(html: str, min_chars: int) -> Optional[str]:
    """
    Candidates in order of preference: meta description, page title,
    inline "shortDescription" JSON, JSON-LD description.
    The first one long enough wins, otherwise the longest.
    """
    soup = BeautifulSoup(html, "html.parser")
    candidates = []

    for attrs in ({"name": "description"}, {"property": "og:description"}):
        tag = soup.find("meta", attrs=attrs)
        if tag and tag.get("content"):
            candidates.append(tag["content"].strip())
            break

    if soup.title and soup.title.string:
        candidates.append(soup.title.string.strip())

    m = SHORT_DESCRIPTION_RE.search(html)
    if m:
        try:
            candidates.append(json.loads(f'"{m.group(1)}"').strip())
        except ValueError:
            logger.debug("Could not decode inline shortDescription")

    for node in iter_json_ld_nodes(html):
        description = node.get("description")
        if isinstance(description, str) and description.strip():
            candidates.append(description.strip())
            break

    candidates = [c for c in candidates if c]
    if not candidates:
        return None
    for c in candidates:
        if len(c) >= min_chars:
            return c
    return max(candidates, key=len)
