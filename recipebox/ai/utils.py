import re
import json
from typing import Any

from ..exceptions import BackendFailure

CODE_FENCE_RE = re.compile(r"^\s*```(?:json|JSON)?\s*\n?(.*?)\n?\s*```\s*$", re.DOTALL)


def normalize_model_id(model_string: str) -> str:
    """
    Sanitizes a model string to be SDK-compatible.

    Examples:
    - 'model="gemini-2.5-flash"' -> 'gemini-2.5-flash'
    - '"gemini-2.5-flash"' -> 'gemini-2.5-flash'

    """
    if not model_string:
        return model_string

    s = model_string.strip()

    # Strip optional 'model=' prefix (case insensitive)
    if s.lower().startswith("model="):
        s = s[6:]

    s = s.strip('"\'')

    return s.strip()


def strip_code_fences(text: str) -> str:
    """'```json\\n{...}\\n```' -> '{...}'"""
    if not text:
        return ""
    m = CODE_FENCE_RE.match(text)
    return (m.group(1) if m else text).strip()


def parse_json_response(text: str) -> Any:
    """
    Parse a model response that should be JSON.
    Tolerates code fences, prose around the payload and trailing commas.
    Raises BackendFailure if nothing parseable is left.
    """
    s = strip_code_fences(text)
    try:
        return json.loads(s)
    except ValueError:
        pass

    starts = [i for i in (s.find("{"), s.find("[")) if i != -1]
    if not starts:
        raise BackendFailure("Response is not JSON")
    start = min(starts)
    end = max(s.rfind("}"), s.rfind("]"))
    if end <= start:
        raise BackendFailure("Response is not JSON")

    candidate = re.sub(r",\s*([}\]])", r"\1", s[start:end + 1])
    try:
        return json.loads(candidate)
    except ValueError as e:
        raise BackendFailure(f"Invalid JSON in response: {e}") from e
