import pytest
from recipebox.parsing.durations import parse_iso_duration, parse_yield

@pytest.mark.parametrize("value,minutes", [
    ("PT1H30M", 90),
    ("PT45M", 45),
    ("PT2H", 120),
    ("PT45S", 1),
    ("PT20S", 0),
    ("P1DT2H", 1560),
    ("pt15m", 15),
    ("PT", 0),
    ("30 minutes", 0),
    ("", 0),
    (None, 0),
    (25, 25),
])
def test_parse_iso_duration(value, minutes):
    assert parse_iso_duration(value) == minutes

@pytest.mark.parametrize("value,servings", [
    ("4 servings", 4),
    ("Makes 12 cookies", 12),
    (6, 6),
    (2.0, 2),
    (["8", "8 servings"], 8),
    ("a dozen", 1),
    (None, 1),
    (0, 1),
    ([], 1),
])
def test_parse_yield(value, servings):
    assert parse_yield(value) == servings
