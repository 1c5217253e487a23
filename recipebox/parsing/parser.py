from typing import Optional, List, Protocol

from pydantic import BaseModel

from ..schemas import ExtractionSource, StructuredIngredient


class ParsedRecipe(BaseModel):
    """What the heuristic parser could pull out of plain text."""
    title: Optional[str] = None
    ingredients: List[str] = []
    structured_ingredients: List[StructuredIngredient] = []
    instructions: List[str] = []


class ExtractionOutcome(BaseModel):
    """
    Uniform result of any extraction strategy.
    source tells the coordinator which branch produced it; the shape is the same for all of them.
    """
    source: ExtractionSource
    title: Optional[str] = None
    description: Optional[str] = None
    ingredients: List[str] = []
    # Set when the strategy already split its ingredients, same order and length
    structured_ingredients: Optional[List[StructuredIngredient]] = None
    instructions: List[str] = []
    cook_time: int = 0
    servings: int = 1
    image: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.ingredients and not self.instructions


class RecipeStrategy(Protocol):
    async def extract(self, text: str) -> Optional[ExtractionOutcome]:
        """Return an outcome, or None when this strategy found nothing usable."""
        ...
