import pytest
from recipebox.ai.utils import normalize_model_id, parse_json_response, strip_code_fences
from recipebox.exceptions import BackendFailure

def test_normalize_model_id():
    assert normalize_model_id('model="gemini-2.5-flash"') == "gemini-2.5-flash"
    assert normalize_model_id("'gemini-2.5-pro' ") == "gemini-2.5-pro"
    assert normalize_model_id("gemini-2.5-flash-lite") == "gemini-2.5-flash-lite"

def test_strip_code_fences():
    assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_code_fences('```\n[1, 2]\n```') == "[1, 2]"
    assert strip_code_fences('{"a": 1}') == '{"a": 1}'

def test_parse_plain_and_fenced_json():
    assert parse_json_response('{"title": "Soup"}') == {"title": "Soup"}
    assert parse_json_response('```json\n{"title": "Soup"}\n```') == {"title": "Soup"}

def test_parse_json_with_surrounding_prose_and_trailing_commas():
    raw = 'Here is the recipe:\n{"ingredients": ["1 egg", "2 cups milk",],}\nEnjoy!'
    assert parse_json_response(raw) == {"ingredients": ["1 egg", "2 cups milk"]}

def test_parse_json_array():
    assert parse_json_response('Result: [{"name": "salt"}]') == [{"name": "salt"}]

@pytest.mark.parametrize("raw", ["", "no json here", "{broken", '{"a": }'])
def test_unparseable_raises_backend_failure(raw):
    with pytest.raises(BackendFailure):
        parse_json_response(raw)
