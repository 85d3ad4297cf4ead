# extraction.py
import json
from typing import Any, Dict

from pydantic import ValidationError

from models import GeneratedSite

_decoder = json.JSONDecoder()


class ExtractionError(ValueError):
    pass


def extract_json(text: str) -> Dict[str, Any]:
    """Return the first JSON object embedded in free-form model text.

    Every ``{`` is tried as a start position and decoded with ``raw_decode``,
    which stops at the matching close brace, so stray braces in surrounding
    prose or trailing text after the object do not break the parse.
    """
    if not text:
        raise ExtractionError("Empty AI response.")

    start = text.find("{")
    if start == -1:
        raise ExtractionError("No valid JSON object found in AI response.")

    while start != -1:
        try:
            value, _ = _decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            pass
        else:
            if isinstance(value, dict):
                return value
        start = text.find("{", start + 1)

    raise ExtractionError("Failed to parse JSON from AI response.")


def parse_generated_site(text: str) -> GeneratedSite:
    data = extract_json(text)
    try:
        return GeneratedSite.model_validate(data)
    except ValidationError as e:
        raise ExtractionError(f"AI response JSON is missing html/css/js: {e.error_count()} error(s)") from e
