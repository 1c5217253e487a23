"""FastAPI dependencies for RecipeBox API.

Provides:
- The shared per-IP rate limiter
- Extraction pipeline and ingredient structurer instances
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from .services.extraction import RecipeExtractionService
from .services.ingredient_structurer import IngredientStructurer

# Rate limiter (per-IP)
limiter = Limiter(key_func=get_remote_address)


def get_extraction_service() -> RecipeExtractionService:
    """A fresh pipeline per request; it holds no state between calls."""
    return RecipeExtractionService()


def get_ingredient_structurer() -> IngredientStructurer:
    return IngredientStructurer()
