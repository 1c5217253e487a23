"""Pydantic schemas for the RecipeBox API.

Request/response models for:
- URL and pasted-text extraction
- Standalone ingredient structuring
"""

from typing import Optional, Literal

from pydantic import BaseModel, ConfigDict, Field


ExtractionSource = Literal["structured_data", "ai", "heuristic"]


# --- Ingredients ---

class StructuredIngredient(BaseModel):
    """One flat ingredient split into its parts.

    amount keeps the original text ("1 1/2", "½", "2-3"), it is never
    converted or normalized. amount and unit may both be empty.
    """
    name: str
    amount: str = ""
    unit: str = ""


# --- Extraction ---

class ExtractRequest(BaseModel):
    url: Optional[str] = None


class ExtractTextRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: Optional[str] = None
    title_hint: Optional[str] = Field(None, alias="titleHint")


class ExtractedRecipe(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    source: Optional[ExtractionSource] = None
    title: Optional[str] = None
    description: Optional[str] = None
    ingredients: list[str] = []
    structured_ingredients: Optional[list[StructuredIngredient]] = Field(
        None, alias="structuredIngredients"
    )
    instructions: list[str] = []
    cook_time: int = Field(0, alias="cookTime")
    servings: int = 1
    image: Optional[str] = None
    error: Optional[str] = None


class ExtractionFailure(BaseModel):
    success: bool = False
    error: str


# --- Structuring ---

class StructureIngredientsRequest(BaseModel):
    ingredients: list[str] = []


class StructureIngredientsResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    structured_ingredients: list[StructuredIngredient] = Field(
        default_factory=list, alias="structuredIngredients"
    )
