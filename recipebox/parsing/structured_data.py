"""
schema.org Recipe extraction from embedded JSON-LD.

When a page carries structured data we trust it verbatim; nothing else in
the pipeline runs on those ingredients/instructions.
"""
import json
import logging
from typing import Any, Iterator, List, Optional

from bs4 import BeautifulSoup
from pydantic import BaseModel, ConfigDict, Field

from ..core.text import normalize_bullet, split_instruction_text, strip_step_prefix
from .durations import parse_iso_duration, parse_yield
from .parser import ExtractionOutcome

logger = logging.getLogger("recipebox.parsing")


class RecipeNode(BaseModel):
    """The subset of schema.org/Recipe we read. Unknown keys are ignored."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    type: Any = Field(None, alias="@type")
    name: Any = None
    description: Any = None
    recipe_ingredient: Any = Field(None, alias="recipeIngredient")
    recipe_instructions: Any = Field(None, alias="recipeInstructions")
    total_time: Any = Field(None, alias="totalTime")
    cook_time: Any = Field(None, alias="cookTime")
    recipe_yield: Any = Field(None, alias="recipeYield")
    image: Any = None


def iter_json_ld_nodes(html: str) -> Iterator[dict]:
    """Yield every JSON object found in ld+json script blocks, in document order."""
    soup = BeautifulSoup(html, "html.parser")
    for script in soup.find_all("script"):
        script_type = (script.get("type") or "").lower()
        if "ld+json" not in script_type:
            continue
        raw = script.string or script.get_text()
        if not raw or not raw.strip():
            continue
        try:
            # Raw tabs and newlines inside strings are common in hand-written blocks
            data = json.loads(raw.strip(), strict=False)
        except ValueError as e:
            logger.debug(f"Skipping malformed JSON-LD block: {e}")
            continue
        yield from _flatten(data)


def _flatten(data: Any) -> Iterator[dict]:
    if isinstance(data, list):
        for item in data:
            yield from _flatten(item)
    elif isinstance(data, dict):
        yield data
        if "@graph" in data:
            yield from _flatten(data["@graph"])
        if isinstance(data.get("mainEntity"), (dict, list)):
            yield from _flatten(data["mainEntity"])


def is_recipe_node(node: dict) -> bool:
    node_type = node.get("@type")
    types = node_type if isinstance(node_type, list) else [node_type]
    for t in types:
        if isinstance(t, str) and t.lower().rsplit("/", 1)[-1] == "recipe":
            return True
    return "recipeIngredient" in node or "recipeInstructions" in node


def _text(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, list):
        for v in value:
            t = _text(v)
            if t:
                return t
    return None


def normalize_ingredients(value: Any) -> List[str]:
    if isinstance(value, str):
        items = [normalize_bullet(line) for line in value.split("\n")]
    elif isinstance(value, list):
        items = []
        for item in value:
            if isinstance(item, str):
                items.append(item.strip())
            elif isinstance(item, dict):
                items.append(str(item.get("text") or item.get("name") or "").strip())
    else:
        return []
    return [i for i in items if i]


def normalize_instructions(value: Any) -> List[str]:
    """
    recipeInstructions comes in every shape the vocabulary allows:
    one string, a list of strings, HowToStep objects, or HowToSection groups of steps.
    """
    steps: List[str] = []

    def visit(item: Any):
        if isinstance(item, str):
            steps.append(item.strip())
        elif isinstance(item, list):
            for sub in item:
                visit(sub)
        elif isinstance(item, dict):
            if "itemListElement" in item:
                visit(item["itemListElement"])
                return
            text = item.get("text") or item.get("name")
            if isinstance(text, str):
                steps.append(text.strip())

    if isinstance(value, str):
        # A single blob: one step per paragraph/sentence
        steps = split_instruction_text(value)
    else:
        visit(value)

    cleaned = [strip_step_prefix(s) for s in steps]
    return [s for s in cleaned if s]


def image_url(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, list):
        for v in value:
            url = image_url(v)
            if url:
                return url
    if isinstance(value, dict):
        return image_url(value.get("url") or value.get("contentUrl"))
    return None


def node_to_outcome(node: RecipeNode) -> ExtractionOutcome:
    return ExtractionOutcome(
        source="structured_data",
        title=_text(node.name),
        description=_text(node.description),
        ingredients=normalize_ingredients(node.recipe_ingredient),
        instructions=normalize_instructions(node.recipe_instructions),
        cook_time=parse_iso_duration(node.total_time or node.cook_time),
        servings=parse_yield(node.recipe_yield),
        image=image_url(node.image),
    )


def extract_structured_recipe(html: str) -> Optional[ExtractionOutcome]:
    """
    First qualifying Recipe node with at least one ingredient or instruction wins.
    Returns None when the page has no usable structured data.
    """
    if not html:
        return None

    for raw in iter_json_ld_nodes(html):
        if not is_recipe_node(raw):
            continue
        outcome = node_to_outcome(RecipeNode.model_validate(raw))
        if outcome.is_empty:
            continue
        logger.info(
            f"Structured data hit: {len(outcome.ingredients)} ingredients, "
            f"{len(outcome.instructions)} instructions"
        )
        return outcome

    return None


class StructuredDataExtractor:
    """Strategy wrapper so the coordinator can treat JSON-LD like any other source."""

    async def extract(self, text: str) -> Optional[ExtractionOutcome]:
        return extract_structured_recipe(text)
