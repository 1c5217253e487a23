import json
import logging
from typing import List, Optional

from ..ai.prompts import STRUCTURING_SYSTEM_PROMPT
from ..ai.utils import normalize_model_id, parse_json_response
from ..core.ai_client import ai_client
from ..exceptions import BackendFailure, BackendUnavailable, StructuringFailure
from ..parsing.ingredient_parser import parse_ingredient_line
from ..schemas import StructuredIngredient
from ..settings import settings

logger = logging.getLogger("recipebox.ai")


def structure_deterministic(ingredients: List[str]) -> List[StructuredIngredient]:
    return [parse_ingredient_line(i) for i in ingredients]


class IngredientStructurer:
    """
    Flat ingredient strings -> {name, amount, unit}, same length and order.

    One batched AI call when the backend is available; the deterministic
    parser covers everything else, so this never fails.
    """

    def __init__(self, model: Optional[str] = None, client=None):
        self.model = normalize_model_id(model or settings.structuring_model)
        self.client = client or ai_client

    async def structure(self, ingredients: List[str]) -> List[StructuredIngredient]:
        if not ingredients:
            return []

        if self.client.is_available():
            try:
                return await self._structure_with_ai(ingredients)
            except StructuringFailure as e:
                logger.warning(f"AI structuring failed, using deterministic parser: {e.message}")

        return structure_deterministic(ingredients)

    async def _structure_with_ai(self, ingredients: List[str]) -> List[StructuredIngredient]:
        try:
            raw = await self.client.generate_text(
                prompt=json.dumps(ingredients, ensure_ascii=False),
                model=self.model,
                system_instruction=STRUCTURING_SYSTEM_PROMPT,
                temperature=0.0,
            )
            data = parse_json_response(raw)
        except (BackendUnavailable, BackendFailure) as e:
            raise StructuringFailure(e.message) from e

        if isinstance(data, dict):
            # {"ingredients": [...]} wrappers
            data = data.get("ingredients") or data.get("structuredIngredients")
        if not isinstance(data, list) or len(data) != len(ingredients):
            raise StructuringFailure(
                f"Expected {len(ingredients)} entries, got {len(data) if isinstance(data, list) else type(data).__name__}"
            )

        out = []
        for original, item in zip(ingredients, data):
            if not isinstance(item, dict):
                raise StructuringFailure("Entry is not an object")
            name = str(item.get("name") or "").strip()
            if not name:
                # name must never be empty; fall back for this entry only
                out.append(parse_ingredient_line(original))
                continue
            out.append(StructuredIngredient(
                name=name,
                amount=str(item.get("amount") or "").strip(),
                unit=str(item.get("unit") or "").strip(),
            ))

        logger.info(f"AI structured {len(out)} ingredients with {self.model}")
        return out
