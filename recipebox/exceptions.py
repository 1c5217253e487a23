"""
Exception types for the recipe extraction pipeline.

Only InputError, FetchError and NoRecipeFound ever reach the HTTP layer.
Everything else is absorbed by the stage that raised it and the pipeline
falls through to the next strategy.
"""
from typing import Optional


class RecipeExtractionError(Exception):
    """Base exception for the extraction pipeline"""
    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InputError(RecipeExtractionError):
    """Raised when the caller supplied a missing or unusable URL/text"""
    status_code = 400


class FetchError(RecipeExtractionError):
    """Raised when the target page is unreachable or answers non-2xx"""

    def __init__(self, status: Optional[int], status_text: str):
        self.status = status
        self.status_text = status_text
        if status is not None:
            message = f"Failed to fetch website: {status} {status_text}".rstrip()
        else:
            message = f"Failed to fetch website: {status_text}"
        super().__init__(message)


class BackendUnavailable(RecipeExtractionError):
    """Raised when no AI backend is configured (mock mode or missing key)"""


class BackendFailure(RecipeExtractionError):
    """Raised when an AI call errors or returns content we cannot use"""

    def __init__(self, message: str, model: Optional[str] = None):
        self.model = model
        super().__init__(message)


class QuotaExceeded(BackendFailure):
    """Raised on a 429 from the AI backend.

    quota_exhausted separates a spent quota from a transient rate limit;
    both skip to the next cascade entry.
    """

    def __init__(self, message: str, model: Optional[str] = None, quota_exhausted: bool = False):
        self.quota_exhausted = quota_exhausted
        super().__init__(message, model=model)


class NoRecipeFound(RecipeExtractionError):
    """Raised when the backend explicitly reports that the content holds no recipe"""
    status_code = 400

    def __init__(self, message: str = "No recipe found"):
        super().__init__(message or "No recipe found")


class StructuringFailure(RecipeExtractionError):
    """Raised when the AI ingredient structuring call cannot be used"""
