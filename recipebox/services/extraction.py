"""
Recipe extraction coordinator.

A small state machine over the extraction strategies:

    FETCH -> STRUCTURED_DATA_CHECK -> SELECT_TEXT -> AI_ATTEMPT
          -> HEURISTIC_FALLBACK -> STRUCTURING -> DONE

Structured data short-circuits straight to STRUCTURING. Every branch
ends in the same ExtractedRecipe shape, so callers never care which one ran.
Only InputError, FetchError and NoRecipeFound escape.
"""
import ipaddress
import logging
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional
from urllib.parse import urlparse

from ..exceptions import FetchError, InputError
from ..infra.http_client import PageFetcher, RawPage
from ..parsing.html_normalizer import normalize_html
from ..parsing.parser import ExtractionOutcome
from ..parsing.rule_based_parser import RuleBasedParser
from ..parsing.structured_data import StructuredDataExtractor
from ..schemas import ExtractedRecipe, StructuredIngredient
from .ai_extraction import AIRecipeExtractor
from .ingredient_structurer import IngredientStructurer
from .video_resolver import VideoMetadata, VideoSourceResolver

logger = logging.getLogger("recipebox.extract")


class ExtractionStage(str, Enum):
    FETCH = "fetch"
    STRUCTURED_DATA_CHECK = "structured_data_check"
    SELECT_TEXT = "select_text"
    AI_ATTEMPT = "ai_attempt"
    HEURISTIC_FALLBACK = "heuristic_fallback"
    STRUCTURING = "structuring"
    DONE = "done"


@dataclass
class _ExtractionRun:
    """Per-request scratch state. Never shared between requests."""
    url: Optional[str] = None
    title_hint: Optional[str] = None
    text: str = ""
    page: Optional[RawPage] = None
    video: Optional[VideoMetadata] = None
    outcome: Optional[ExtractionOutcome] = None
    structured: List[StructuredIngredient] = field(default_factory=list)
    request_id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])


def validate_url(url: Optional[str]) -> str:
    """Reject missing, non-HTTP(S) and private-network URLs before any network call."""
    if not url or not url.strip():
        raise InputError("URL is required")

    url = url.strip()
    parsed = urlparse(url)
    if parsed.scheme.lower() not in ("http", "https") or not parsed.hostname:
        raise InputError("Only http:// and https:// URLs are supported")

    host = parsed.hostname.lower()
    if host == "localhost":
        raise InputError("Cannot extract from internal addresses")
    try:
        ip = ipaddress.ip_address(host)
    except ValueError:
        return url  # Hostname is not an IP
    if ip.is_private or ip.is_loopback or ip.is_link_local or ip.is_unspecified:
        raise InputError("Cannot extract from internal addresses")
    return url


class RecipeExtractionService:
    def __init__(
        self,
        fetcher: Optional[PageFetcher] = None,
        video_resolver: Optional[VideoSourceResolver] = None,
        structured_extractor: Optional[StructuredDataExtractor] = None,
        ai_extractor: Optional[AIRecipeExtractor] = None,
        heuristic_parser: Optional[RuleBasedParser] = None,
        structurer: Optional[IngredientStructurer] = None,
    ):
        self.fetcher = fetcher or PageFetcher()
        self.video_resolver = video_resolver or VideoSourceResolver()
        self.structured_extractor = structured_extractor or StructuredDataExtractor()
        self.ai_extractor = ai_extractor or AIRecipeExtractor()
        self.heuristic_parser = heuristic_parser or RuleBasedParser()
        self.structurer = structurer or IngredientStructurer()

        self._handlers = {
            ExtractionStage.FETCH: self._fetch,
            ExtractionStage.STRUCTURED_DATA_CHECK: self._check_structured_data,
            ExtractionStage.SELECT_TEXT: self._select_text,
            ExtractionStage.AI_ATTEMPT: self._attempt_ai,
            ExtractionStage.HEURISTIC_FALLBACK: self._run_heuristic,
            ExtractionStage.STRUCTURING: self._structure,
        }

    async def extract_from_url(self, url: Optional[str]) -> ExtractedRecipe:
        run = _ExtractionRun(url=validate_url(url))
        logger.info(f"[{run.request_id}] Extracting recipe from URL: {run.url}")
        return await self._run(run, ExtractionStage.FETCH)

    async def extract_from_text(self, text: Optional[str], title_hint: Optional[str] = None) -> ExtractedRecipe:
        """Pasted text skips fetching and structured data."""
        if not text or not text.strip():
            raise InputError("Text is required")
        run = _ExtractionRun(text=text.strip(), title_hint=(title_hint or "").strip() or None)
        logger.info(f"[{run.request_id}] Extracting recipe from pasted text ({len(run.text)} chars)")
        return await self._run(run, ExtractionStage.AI_ATTEMPT)

    async def _run(self, run: _ExtractionRun, stage: ExtractionStage) -> ExtractedRecipe:
        while stage is not ExtractionStage.DONE:
            logger.info(f"[{run.request_id}] stage={stage.value}")
            stage = await self._handlers[stage](run)
        return self._build_result(run)

    # --- Stages ---

    async def _fetch(self, run: _ExtractionRun) -> ExtractionStage:
        run.video = await self.video_resolver.resolve(run.url)
        try:
            run.page = await self.fetcher.fetch(run.url)
        except FetchError as e:
            # The video text is enough to go on; without it there is nothing to parse
            if run.video and run.video.text:
                logger.warning(f"[{run.request_id}] {e.message}; continuing with video metadata")
                return ExtractionStage.SELECT_TEXT
            raise
        return ExtractionStage.STRUCTURED_DATA_CHECK

    async def _check_structured_data(self, run: _ExtractionRun) -> ExtractionStage:
        outcome = await self.structured_extractor.extract(run.page.text if run.page else "")
        if outcome:
            run.outcome = outcome
            return ExtractionStage.STRUCTURING
        logger.info(f"[{run.request_id}] No structured recipe data")
        return ExtractionStage.SELECT_TEXT

    async def _select_text(self, run: _ExtractionRun) -> ExtractionStage:
        # Without a page the video text is all there is, even a bare title
        if run.video and ((run.video.description or "").strip() or run.page is None):
            run.text = run.video.text
            logger.info(f"[{run.request_id}] Using video metadata text ({len(run.text)} chars)")
        else:
            run.text = normalize_html(run.page.text) if run.page else ""
            logger.info(f"[{run.request_id}] Using normalized page text ({len(run.text)} chars)")
        return ExtractionStage.AI_ATTEMPT

    async def _attempt_ai(self, run: _ExtractionRun) -> ExtractionStage:
        outcome = await self.ai_extractor.extract(run.text)
        if outcome:
            run.outcome = outcome
            return ExtractionStage.STRUCTURING
        return ExtractionStage.HEURISTIC_FALLBACK

    async def _run_heuristic(self, run: _ExtractionRun) -> ExtractionStage:
        run.outcome = await self.heuristic_parser.extract(run.text, title_hint=run.title_hint)
        return ExtractionStage.STRUCTURING

    async def _structure(self, run: _ExtractionRun) -> ExtractionStage:
        outcome = run.outcome
        pre_split = outcome.structured_ingredients
        if pre_split is not None and len(pre_split) == len(outcome.ingredients):
            logger.info(f"[{run.request_id}] Ingredients already structured by {outcome.source} parser")
            run.structured = list(pre_split)
        else:
            run.structured = await self.structurer.structure(outcome.ingredients)
        return ExtractionStage.DONE

    def _build_result(self, run: _ExtractionRun) -> ExtractedRecipe:
        outcome = run.outcome
        video = run.video

        title = outcome.title or run.title_hint or (video.title if video else None)
        image = outcome.image or (video.thumbnail if video else None)

        logger.info(
            f"[{run.request_id}] Done via {outcome.source}: "
            f"{len(outcome.ingredients)} ingredients, {len(outcome.instructions)} instructions"
        )
        return ExtractedRecipe(
            success=True,
            source=outcome.source,
            title=title,
            description=outcome.description,
            ingredients=outcome.ingredients,
            structured_ingredients=run.structured,
            instructions=outcome.instructions,
            cook_time=outcome.cook_time,
            servings=outcome.servings,
            image=image,
        )
