import re
from typing import Optional, Tuple

from ..schemas import StructuredIngredient
from .vocab import QUANTITY_RES, UNIT_RE


def sanitize_ingredient_text(text: str) -> str:
    """Strip markdown and normalize whitespace."""
    if not text:
        return ""

    s = text
    # Remove markdown bold/italic markers
    s = s.replace("**", "").replace("__", "").replace("*", "")

    # Remove leading bullets
    s = re.sub(r'^[\s\-–—•·#]+', '', s)

    # Collapse whitespace
    s = re.sub(r'\s+', ' ', s).strip()

    return s


def match_quantity(text: str) -> Optional[Tuple[str, str]]:
    """
    Match a leading quantity token.
    Returns (amount, rest) or None. The amount is the text as written.
    """
    for _kind, pattern in QUANTITY_RES:
        m = pattern.match(text)
        if m:
            return m.group("amount").strip(), text[m.end():].strip()
    return None


def match_unit(text: str) -> Optional[Tuple[str, str]]:
    """Match a leading unit token. Returns (unit without trailing period, rest) or None."""
    m = UNIT_RE.match(text)
    if not m:
        return None
    return m.group("unit"), text[m.end():].strip()


def strip_leading_of(text: str) -> str:
    return re.sub(r'^of\s+', '', text, flags=re.IGNORECASE).strip()


def split_ingredient(text: str) -> Optional[Tuple[str, str, str]]:
    """
    Split "1 1/2 cups of sugar" into ("1 1/2", "cups", "sugar").
    Returns None when the text does not start with a quantity.
    The unit is optional and may come back empty.
    """
    q = match_quantity(text)
    if not q:
        return None
    amount, rest = q

    unit = ""
    u = match_unit(rest)
    if u:
        unit, rest = u

    return amount, unit, strip_leading_of(rest)


def parse_ingredient_line(line: str) -> StructuredIngredient:
    """
    Deterministic parse of one flat ingredient string.
    Never fails: anything without a leading quantity becomes a name-only entry.
    """
    clean_line = sanitize_ingredient_text(line)
    parts = split_ingredient(clean_line)
    if not parts:
        return StructuredIngredient(name=clean_line or (line or "").strip())

    amount, unit, name = parts
    if not name:
        # "2 cups" on its own; keep the whole text as the name
        return StructuredIngredient(name=clean_line)

    return StructuredIngredient(name=name, amount=amount, unit=unit)


def format_ingredient(amount: str, unit: str, name: str) -> str:
    return " ".join(p for p in (amount, unit, name) if p).strip()
