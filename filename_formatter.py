"""Canonical `<author>-<year>-<title>.pdf` filename formatting."""

from __future__ import annotations

import re

from models import PaperMetadata

MAX_STEM_LENGTH = 200

NAMING_GRAMMAR = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*-[0-9]{4}-[a-z0-9]+(-[a-z0-9]+)*\.pdf$")

# Underscores are word separators too, so "Test_Name" becomes "test-name".
_SEPARATOR_RUN = re.compile(r"[\s_]+")
_DISALLOWED = re.compile(r"[^a-z0-9-]")
_DASH_RUN = re.compile(r"-{2,}")


def sanitize_segment(text: str) -> str:
    """Lower-case, dash-join and strip a segment down to `[a-z0-9-]`.

    Non-ASCII letters are dropped rather than transliterated, so
    "Müller" becomes "mller".
    """
    value = _SEPARATOR_RUN.sub("-", text.lower())
    value = _DISALLOWED.sub("", value)
    value = _DASH_RUN.sub("-", value)
    return value.strip("-")


def format_filename(metadata: PaperMetadata) -> str:
    """Build the canonical filename for already-validated metadata."""
    author = sanitize_segment(metadata.author)
    year = f"{metadata.year:04d}"
    title = _fit_title(sanitize_segment(metadata.title), prefix=f"{author}-{year}-")
    return f"{author}-{year}-{title}.pdf"


def _fit_title(title: str, prefix: str) -> str:
    """Drop trailing title words until the stem fits MAX_STEM_LENGTH.

    Author and year are never cut, and the first title word is always kept.
    """
    if len(prefix) + len(title) <= MAX_STEM_LENGTH:
        return title

    words = title.split("-")
    kept = [words[0]]
    for word in words[1:]:
        if len(prefix) + len("-".join(kept + [word])) > MAX_STEM_LENGTH:
            break
        kept.append(word)
    return "-".join(kept)


def matches_naming_grammar(filename: str) -> bool:
    return NAMING_GRAMMAR.fullmatch(filename) is not None


def is_safe_filename(filename: str) -> bool:
    """Reject empty names, path traversal and anything that is not a .pdf."""
    return (
        bool(filename)
        and ".." not in filename
        and "/" not in filename
        and "\\" not in filename
        and filename.endswith(".pdf")
    )
