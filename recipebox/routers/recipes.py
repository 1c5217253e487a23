import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from ..deps import get_extraction_service, get_ingredient_structurer, limiter
from ..exceptions import RecipeExtractionError
from ..schemas import (
    ExtractedRecipe,
    ExtractionFailure,
    ExtractRequest,
    ExtractTextRequest,
    StructureIngredientsRequest,
    StructureIngredientsResponse,
)
from ..services.extraction import RecipeExtractionService
from ..services.ingredient_structurer import IngredientStructurer
from ..settings import settings

logger = logging.getLogger("recipebox.api")

router = APIRouter(prefix="/recipes", tags=["recipes"])


def _failure(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ExtractionFailure(error=message).model_dump())


@router.post("/extract", response_model=ExtractedRecipe)
@limiter.limit(settings.extract_rate_limit)
async def extract_recipe(
    request: Request,  # Required for rate limiter
    payload: ExtractRequest,
    service: RecipeExtractionService = Depends(get_extraction_service),
):
    """
    Extract a recipe from a web page or video URL.
    Failures come back as {success: false, error} with 400 for bad input or
    "no recipe found", 500 for unreachable pages and anything unexpected.
    """
    try:
        return await service.extract_from_url(payload.url)
    except RecipeExtractionError as e:
        logger.warning(f"Extraction failed for {payload.url}: {e.message}")
        return _failure(e.status_code, e.message)
    except Exception:
        logger.exception(f"Unexpected error extracting {payload.url}")
        return _failure(500, "Failed to extract recipe")


@router.post("/extract/text", response_model=ExtractedRecipe)
@limiter.limit(settings.extract_rate_limit)
async def extract_recipe_from_text(
    request: Request,  # Required for rate limiter
    payload: ExtractTextRequest,
    service: RecipeExtractionService = Depends(get_extraction_service),
):
    """Same pipeline for pasted text: AI, then heuristics, then structuring."""
    try:
        return await service.extract_from_text(payload.text, title_hint=payload.title_hint)
    except RecipeExtractionError as e:
        logger.warning(f"Text extraction failed: {e.message}")
        return _failure(e.status_code, e.message)
    except Exception:
        logger.exception("Unexpected error extracting pasted text")
        return _failure(500, "Failed to extract recipe")


@router.post("/ingredients/structure", response_model=StructureIngredientsResponse)
async def structure_ingredients(
    payload: StructureIngredientsRequest,
    structurer: IngredientStructurer = Depends(get_ingredient_structurer),
):
    """Split flat ingredient lines into {name, amount, unit}, same order and length."""
    lines = [str(i) for i in payload.ingredients]
    structured = await structurer.structure(lines)
    return StructureIngredientsResponse(structured_ingredients=structured)
