import re
from typing import Any

ISO_DURATION_RE = re.compile(
    r"^P(?:(?P<days>\d+(?:\.\d+)?)D)?"
    r"(?:T(?:(?P<hours>\d+(?:\.\d+)?)H)?(?:(?P<minutes>\d+(?:\.\d+)?)M)?(?:(?P<seconds>\d+(?:\.\d+)?)S)?)?$",
    re.IGNORECASE,
)


def parse_iso_duration(value: Any) -> int:
    """
    'PT1H30M' -> 90, 'PT45S' -> 1, 'P1DT2H' -> 1560.
    Anything we can't read is 0.
    """
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return max(int(value), 0)
    if not isinstance(value, str):
        return 0

    m = ISO_DURATION_RE.match(value.strip())
    if not m or not any(m.groupdict().values()):
        return 0

    parts = {k: float(v) if v else 0.0 for k, v in m.groupdict().items()}
    minutes = parts["days"] * 1440 + parts["hours"] * 60 + parts["minutes"] + round(parts["seconds"] / 60)
    return int(round(minutes))


def parse_yield(value: Any) -> int:
    """
    recipeYield comes as 4, "4", "4 servings", "Makes 12 cookies" or ["4", "4 servings"].
    First digit run wins; default 1.
    """
    if isinstance(value, list):
        value = value[0] if value else None

    if isinstance(value, bool) or value is None:
        return 1
    if isinstance(value, (int, float)):
        n = int(value)
        return n if n > 0 else 1

    m = re.search(r"\d+", str(value))
    if not m:
        return 1
    n = int(m.group(0))
    return n if n > 0 else 1
