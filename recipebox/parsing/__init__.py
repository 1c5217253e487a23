from .parser import ParsedRecipe, ExtractionOutcome, RecipeStrategy
from .rule_based_parser import RuleBasedParser
from .structured_data import StructuredDataExtractor, extract_structured_recipe
from .html_normalizer import normalize_html
from .ingredient_parser import parse_ingredient_line

__all__ = [
    "ParsedRecipe", "ExtractionOutcome", "RecipeStrategy", "RuleBasedParser",
    "StructuredDataExtractor", "extract_structured_recipe", "normalize_html", "parse_ingredient_line",
]
