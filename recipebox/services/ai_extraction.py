import logging
from functools import partial
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..ai.prompts import EXTRACTION_SYSTEM_PROMPT, EXTRACTION_USER_PROMPT
from ..ai.utils import normalize_model_id, parse_json_response
from ..core.ai_client import ai_client
from ..exceptions import BackendFailure, BackendUnavailable, NoRecipeFound, QuotaExceeded
from ..parsing.durations import parse_yield
from ..parsing.ingredient_parser import format_ingredient
from ..parsing.parser import ExtractionOutcome
from ..settings import settings

logger = logging.getLogger("recipebox.ai")


class AIRecipePayload(BaseModel):
    """What we accept back from the model. Missing fields take the contract defaults."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: Optional[str] = None
    description: Optional[str] = None
    ingredients: List[str] = []
    instructions: List[str] = []
    cook_time: int = Field(0, alias="cookTime")
    servings: int = 1
    image: Optional[str] = None

    @field_validator("title", "description", mode="before")
    @classmethod
    def coerce_text(cls, v: Any):
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    @field_validator("ingredients", mode="before")
    @classmethod
    def flatten_ingredients(cls, v: Any):
        # Some models answer with {"name", "amount", "unit"} objects instead of strings
        if not isinstance(v, list):
            return []
        out = []
        for item in v:
            if isinstance(item, dict):
                text = format_ingredient(
                    str(item.get("amount") or "").strip(),
                    str(item.get("unit") or "").strip(),
                    str(item.get("name") or "").strip(),
                )
            else:
                text = str(item or "").strip()
            if text:
                out.append(text)
        return out

    @field_validator("instructions", mode="before")
    @classmethod
    def clean_instructions(cls, v: Any):
        if isinstance(v, str):
            v = [v]
        if not isinstance(v, list):
            return []
        out = []
        for item in v:
            if isinstance(item, dict):
                item = item.get("text") or item.get("name") or ""
            text = str(item or "").strip()
            if text:
                out.append(text)
        return out

    @field_validator("cook_time", mode="before")
    @classmethod
    def coerce_minutes(cls, v: Any):
        try:
            return max(int(float(v)), 0)
        except (TypeError, ValueError):
            return 0

    @field_validator("servings", mode="before")
    @classmethod
    def coerce_servings(cls, v: Any):
        return parse_yield(v)

    @field_validator("image", mode="before")
    @classmethod
    def http_image_only(cls, v: Any):
        if isinstance(v, str) and v.strip().lower().startswith(("http://", "https://")):
            return v.strip()
        return None


class AIRecipeExtractor:
    """
    Ask the model cascade for a recipe.

    Models are tried strictly in order, one call each, and the first usable
    answer wins. Quota errors and broken answers skip to the next model.
    """

    def __init__(self, models: Optional[List[str]] = None, client=None, max_input_chars: Optional[int] = None):
        self.models = [normalize_model_id(m) for m in (models or settings.extraction_models) if m and m.strip()]
        self.client = client or ai_client
        self.max_input_chars = max_input_chars or settings.ai_max_input_chars

    def is_available(self) -> bool:
        return self.client.is_available()

    async def extract(self, text: str) -> Optional[ExtractionOutcome]:
        """
        Returns an outcome on the first success, None if every model failed.
        Raises NoRecipeFound only when a model said there is no recipe and none produced one.
        """
        if not self.is_available():
            logger.info("AI unavailable, skipping AI extraction")
            return None

        content = (text or "")[:self.max_input_chars]
        if not content.strip():
            return None

        attempts = [partial(self._attempt, model, content) for model in self.models]
        no_recipe_message = None

        for model, attempt in zip(self.models, attempts):
            try:
                payload = await attempt()
            except NoRecipeFound as e:
                logger.info(f"Model {model} reports no recipe")
                no_recipe_message = e.message
                continue
            except BackendUnavailable:
                logger.info("AI became unavailable mid-cascade")
                return None
            except QuotaExceeded as e:
                logger.warning(f"Model {model} quota/rate limited (exhausted={e.quota_exhausted}), trying next model")
                continue
            except BackendFailure as e:
                logger.warning(f"Model {model} failed: {e.message}")
                continue

            logger.info(
                f"AI extraction succeeded with {model}: "
                f"{len(payload.ingredients)} ingredients, {len(payload.instructions)} instructions"
            )
            return ExtractionOutcome(
                source="ai",
                title=payload.title,
                description=payload.description,
                ingredients=payload.ingredients,
                instructions=payload.instructions,
                cook_time=payload.cook_time,
                servings=payload.servings,
                image=payload.image,
            )

        if no_recipe_message:
            raise NoRecipeFound(no_recipe_message)

        logger.warning("All extraction models failed")
        return None

    async def _attempt(self, model: str, content: str) -> AIRecipePayload:
        raw = await self.client.generate_text(
            prompt=EXTRACTION_USER_PROMPT.format(text=content),
            model=model,
            system_instruction=EXTRACTION_SYSTEM_PROMPT,
            max_output_tokens=settings.ai_max_output_tokens,
            temperature=settings.ai_temperature,
        )
        data = parse_json_response(raw)

        if not isinstance(data, dict):
            raise BackendFailure("Expected a JSON object", model=model)
        if data.get("error"):
            raise NoRecipeFound(str(data["error"]))

        payload = AIRecipePayload.model_validate(data)
        if not payload.ingredients and not payload.instructions:
            raise BackendFailure("Response has no ingredients or instructions", model=model)
        return payload
