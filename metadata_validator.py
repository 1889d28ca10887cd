"""Validation of raw model output into a PaperMetadata record."""

from __future__ import annotations

import json
import re
from datetime import date
from json import JSONDecodeError
from typing import Any

from errors import EmptyField, InvalidYear, MalformedResponse
from filename_formatter import sanitize_segment
from models import PaperMetadata

MIN_YEAR = 1900

# Accepted spellings per field, compared case-insensitively.
_FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "author": ("author", "first_author"),
    "year": ("year",),
    "title": ("title",),
}

_CONTROL_OR_SEPARATOR = re.compile(r"[\x00-\x1f\x7f/\\]")
_WHITESPACE_RUN = re.compile(r"\s+")


def validate_metadata(raw_text: str) -> PaperMetadata:
    """Turn one model response into validated metadata.

    Raises MalformedResponse, InvalidYear or EmptyField. Missing data is never
    filled in; the caller decides whether to ask the model again.
    """
    fields = _lowercase_keys(_parse_metadata_json(raw_text))

    author = _text_field(fields, "author")
    title = _text_field(fields, "title")
    year = _coerce_year(_lookup(fields, "year"))

    if _CONTROL_OR_SEPARATOR.search(author):
        raise MalformedResponse(f"author contains path separators or control characters: {author!r}")
    if not sanitize_segment(author):
        raise EmptyField(f"author has no filename-safe characters: {author!r}")
    if not sanitize_segment(title):
        raise EmptyField(f"title has no filename-safe characters: {title!r}")

    return PaperMetadata(author=author, year=year, title=title)


def _parse_metadata_json(content: str) -> dict[str, Any]:
    """Parse possibly noisy model output into a JSON object."""
    if not isinstance(content, str) or not content.strip():
        raise MalformedResponse("model returned an empty response")
    try:
        parsed = json.loads(content)
    except JSONDecodeError:
        parsed = _extract_first_json_object(content)

    if not isinstance(parsed, dict):
        raise MalformedResponse("expected a JSON object from the model")
    return parsed


def _extract_first_json_object(content: str) -> dict[str, Any]:
    """Extract the first decodable JSON object from an arbitrary string."""
    decoder = json.JSONDecoder()
    for index, char in enumerate(content):
        if char != "{":
            continue
        try:
            candidate, _ = decoder.raw_decode(content[index:])
        except JSONDecodeError:
            continue
        if isinstance(candidate, dict):
            return candidate
    raise MalformedResponse("could not find a JSON object in the model output")


def _lowercase_keys(data: dict[str, Any]) -> dict[str, Any]:
    return {str(key).strip().lower(): value for key, value in data.items()}


def _lookup(fields: dict[str, Any], name: str) -> Any:
    for alias in _FIELD_ALIASES[name]:
        if alias in fields:
            return fields[alias]
    raise MalformedResponse(f"response is missing the '{name}' field")


def _text_field(fields: dict[str, Any], name: str) -> str:
    value = _lookup(fields, name)
    if value is None:
        raise EmptyField(f"'{name}' is empty")
    if not isinstance(value, str):
        raise MalformedResponse(f"'{name}' must be a string, got {type(value).__name__}")
    value = _WHITESPACE_RUN.sub(" ", value).strip()
    if not value:
        raise EmptyField(f"'{name}' is empty")
    return value


def _coerce_year(value: Any) -> int:
    # bool is an int subclass; true/false is never a year.
    if isinstance(value, bool):
        raise InvalidYear(f"year is not a number: {value!r}")
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, int):
        text = str(value)
    elif isinstance(value, str):
        text = value.strip()
    else:
        raise InvalidYear(f"year is not a number: {value!r}")

    if len(text) != 4 or not text.isascii() or not text.isdigit():
        raise InvalidYear(f"year must be a 4-digit number, got {value!r}")

    year = int(text)
    max_year = date.today().year + 1
    if not MIN_YEAR <= year <= max_year:
        raise InvalidYear(f"year {year} is outside {MIN_YEAR}-{max_year}")
    return year
