import re
import logging
from enum import Enum
from typing import List, Optional, Tuple

from ..core.text import (
    clean_md,
    collapse_whitespace,
    dedupe_case_insensitive,
    normalize_bullet,
    normalize_emojis,
    strip_step_prefix,
    title_case_words,
)
from ..schemas import StructuredIngredient
from .ingredient_parser import format_ingredient, match_quantity, match_unit, split_ingredient
from .parser import ExtractionOutcome, ParsedRecipe
from .vocab import (
    COOKING_VERBS,
    FOOD_WORDS,
    GENERIC_TITLE_WORDS,
    HEADER_MAX_LEN,
    INGREDIENT_HEADERS,
    INGREDIENT_MAX_LEN,
    INSTRUCTION_CONNECTORS,
    INSTRUCTION_HEADERS,
    INSTRUCTION_MAX_LEN,
    INSTRUCTION_MIN_LEN,
    MAX_INGREDIENTS,
    MAX_INSTRUCTIONS,
    NEUTRAL_HEADERS,
    NON_INGREDIENT_WORDS,
    SHORT_INPUT_MAX_CHARS,
    TITLE_MAX_LEN,
    TITLE_MIN_LEN,
    TITLE_SCAN_LINES,
)

logger = logging.getLogger("recipebox.parsing")

# "1. Mix", "2) Bake", "3 - Serve", "Step 4: Cool"; "2 - 3 cloves garlic" is a range, not step 2
NUMBERED_STEP_RE = re.compile(r'^\s*(?:step\s*)?\d{1,2}(?:[.)]|\s*:|\s*[\-–](?!\s*\d))\s+(.+)$', re.IGNORECASE)
BULLET_RE = re.compile(r'^\s*[-–—•*·]\s*\S')
# "Sugar: 1/2 cup", "Flour - 2 cups, sifted"
REVERSED_RE = re.compile(r'^(?P<name>[^\d:\-–—]{2,60}?)\s*[:\-–—]\s*(?P<rest>\d.*|[½⅓⅔¼¾⅕⅛⅜⅝⅞].*)$')
WORD_RE = re.compile(r"[a-zà-ÿ°]+")


class SectionState(str, Enum):
    NEUTRAL = "neutral"
    INGREDIENTS = "ingredients"
    INSTRUCTIONS = "instructions"


def _words(text: str) -> set:
    return set(WORD_RE.findall(text.lower()))


def _has_keyword(lower: str, keywords) -> bool:
    return any(re.search(rf"\b{re.escape(k)}\b", lower) for k in keywords)


def clean_ingredient_name(name: str) -> str:
    name = name.replace("**", "").replace("__", "")
    name = re.sub(r'^[^\w(]+|[^\w)]+$', '', name)
    return title_case_words(collapse_whitespace(name))


def looks_like_instruction(text: str) -> bool:
    """Cooking verb plus a connector ("until", "for", ...) inside the plausible length window."""
    if not (INSTRUCTION_MIN_LEN <= len(text) <= INSTRUCTION_MAX_LEN):
        return False
    words = _words(text)
    return bool(words & COOKING_VERBS) and bool(words & INSTRUCTION_CONNECTORS)


class RuleBasedParser:
    """
    Line-oriented fallback parser used when there is neither structured data nor a working AI backend.

    Lines are consumed one at a time by a three-state automaton
    (neutral / ingredients / instructions); section headers move it between states.
    """

    async def extract(self, text: str, title_hint: Optional[str] = None) -> Optional[ExtractionOutcome]:
        parsed = self.parse(text, {"title_hint": title_hint} if title_hint else None)
        return ExtractionOutcome(
            source="heuristic",
            title=parsed.title,
            ingredients=parsed.ingredients,
            structured_ingredients=parsed.structured_ingredients,
            instructions=parsed.instructions,
        )

    def parse(self, text: str, hints: dict = None) -> ParsedRecipe:
        text = normalize_emojis(text or "")
        lines = [line.strip() for line in text.split('\n') if line.strip()]

        state = SectionState.NEUTRAL
        ingredients: List[Tuple[str, StructuredIngredient]] = []
        instructions: List[str] = []

        for line in lines:
            header = self._header_state(line)
            if header is not None:
                state = header
                continue

            kind, value = self._classify(line, state)
            if kind == "ingredient":
                ingredients.append(value)
            elif kind == "instruction":
                instructions.append(value)

        seen = set()
        unique_ingredients = []
        for flat, structured in ingredients:
            if flat.lower() in seen:
                continue
            seen.add(flat.lower())
            unique_ingredients.append((flat, structured))
        unique_ingredients = unique_ingredients[:MAX_INGREDIENTS]
        instructions = dedupe_case_insensitive(instructions)[:MAX_INSTRUCTIONS]

        if hints and hints.get('title_hint'):
            title = hints['title_hint']
        else:
            title = self._extract_title(lines)

        if not unique_ingredients and not instructions:
            instructions = self._degenerate_fallback(text)

        logger.info(f"Heuristic parse: {len(unique_ingredients)} ingredients, {len(instructions)} instructions")

        return ParsedRecipe(
            title=title,
            ingredients=[flat for flat, _ in unique_ingredients],
            structured_ingredients=[s for _, s in unique_ingredients],
            instructions=instructions,
        )

    def _header_state(self, line: str) -> Optional[SectionState]:
        clean = clean_md(line).strip().rstrip(':').strip()
        if not clean or len(clean) > HEADER_MAX_LEN:
            return None
        if NUMBERED_STEP_RE.match(line) or match_quantity(clean):
            return None

        lower = clean.lower()
        words = _words(lower)
        # "Prep time: 10 minutes", "Total time" are metadata, not sections
        if "time" in words or len(lower.split()) > 5:
            return None
        # "Mix all ingredients" is a step
        if words & COOKING_VERBS:
            return None

        if _has_keyword(lower, INGREDIENT_HEADERS):
            return SectionState.INGREDIENTS
        if _has_keyword(lower, INSTRUCTION_HEADERS):
            return SectionState.INSTRUCTIONS
        if _has_keyword(lower, NEUTRAL_HEADERS):
            return SectionState.NEUTRAL
        return None

    def _classify(self, line: str, state: SectionState):
        numbered = NUMBERED_STEP_RE.match(line)
        bullet = BULLET_RE.match(line)
        if numbered:
            body = numbered.group(1)
        elif bullet:
            body = normalize_bullet(line)
        else:
            body = line
        body = clean_md(body)
        if not body:
            return None, None

        ingredient = self._match_ingredient(body)
        if ingredient and not (state == SectionState.INSTRUCTIONS and looks_like_instruction(body)):
            if not (numbered and state == SectionState.INSTRUCTIONS):
                return "ingredient", ingredient

        step = strip_step_prefix(body)
        if numbered or (bullet and state == SectionState.INSTRUCTIONS):
            if len(step) >= 3 and len(step) <= INSTRUCTION_MAX_LEN:
                return "instruction", step
        if looks_like_instruction(step):
            return "instruction", step
        if state == SectionState.INSTRUCTIONS and INSTRUCTION_MIN_LEN <= len(step) <= INSTRUCTION_MAX_LEN and ' ' in step:
            return "instruction", step

        if state == SectionState.INGREDIENTS and self._plausible_bare_ingredient(body):
            name = clean_ingredient_name(body)
            return "ingredient", (name, StructuredIngredient(name=name))

        return None, None

    def _match_ingredient(self, text: str) -> Optional[Tuple[str, StructuredIngredient]]:
        """
        Pattern A: "2 cups flour", "1 1/2 tsp. salt", "3 eggs".
        Pattern B: "Flour - 2 cups", "Sugar: 1/2 cup".
        Returns (flat text, structured) or None.
        """
        if len(text) > INGREDIENT_MAX_LEN:
            return None

        parts = split_ingredient(text)
        if parts:
            amount, unit, name = parts
        else:
            m = REVERSED_RE.match(text)
            if not m:
                return None
            q = match_quantity(m.group("rest"))
            if not q:
                return None
            amount, rest = q
            unit = ""
            u = match_unit(rest)
            if u:
                unit, rest = u
            # A reversed line with trailing prose is a sentence, not an ingredient
            if rest.strip(" ,.;"):
                return None
            name = m.group("name")

        name = clean_ingredient_name(name)
        if not name:
            return None

        words = _words(name)
        if words & COOKING_VERBS or words & NON_INGREDIENT_WORDS:
            return None
        first = name.split()[0].lower()
        if first in NON_INGREDIENT_WORDS:
            return None
        if not unit and len(name.split()) > 8:
            return None

        return format_ingredient(amount, unit, name), StructuredIngredient(name=name, amount=amount, unit=unit)

    def _plausible_bare_ingredient(self, text: str) -> bool:
        # "Salt and pepper to taste" under an Ingredients header
        if len(text) > 60 or text.endswith(('.', '!', '?', ':')):
            return False
        words = _words(text)
        if not words or words & COOKING_VERBS or words & NON_INGREDIENT_WORDS:
            return False
        return len(text.split()) <= 8

    def _extract_title(self, lines: List[str]) -> Optional[str]:
        for line in lines[:TITLE_SCAN_LINES]:
            if re.search(r'[-–—•*|]', line) or 'http' in line.lower():
                continue
            candidate = clean_md(line)
            if not (TITLE_MIN_LEN <= len(candidate) <= TITLE_MAX_LEN):
                continue
            if not candidate[0].isupper() or candidate.endswith(('.', ':', '?', '!')):
                continue
            if _words(candidate) & GENERIC_TITLE_WORDS:
                continue
            if self._header_state(candidate) is not None:
                continue
            kind, _ = self._classify(candidate, SectionState.NEUTRAL)
            if kind is not None:
                continue
            return candidate
        return None

    def _degenerate_fallback(self, text: str) -> List[str]:
        """Short captions with food words but no structure become one instruction instead of nothing."""
        stripped = collapse_whitespace(text)
        if not stripped or len(stripped) > SHORT_INPUT_MAX_CHARS:
            return []
        if _words(stripped) & FOOD_WORDS:
            logger.info("Heuristic parse found nothing; keeping short input as a single instruction")
            return [stripped]
        return []
