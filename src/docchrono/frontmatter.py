"""Splitting documents into their ``+++`` metadata block and body text."""

from __future__ import annotations

import re
from typing import Tuple

from docchrono.errors import NoMetadataBlockFound

MARKER = "+++"

# Group 1 is the metadata text (it starts with the line break after the opening
# marker), group 2 is the body after the line break that ends the closing marker.
_FRONT_MATTER_RE = re.compile(
    r"^\s*\+\+\+(\r?\n.*?)\+\+\+\s*(?:\Z|\r?\n(.*)\Z)",
    re.DOTALL,
)


def split_document(text: str) -> Tuple[str, str]:
    """Return ``(metadata_text, body_text)`` for a document.

    Raises ``NoMetadataBlockFound`` when the text does not open with a
    ``+++`` delimited block.
    """
    match = _FRONT_MATTER_RE.match(text)
    if match is None:
        raise NoMetadataBlockFound("Failed to find a +++ delimited metadata block")
    return match.group(1), match.group(2) or ""


def join_document(metadata_text: str, body_text: str, newline: str = "\n") -> str:
    """Rebuild document text from its parts.

    A blank line separates the closing marker from a non-empty body.
    ``newline`` ends the closing marker line and the blank line.
    """
    parts = [MARKER, metadata_text, MARKER, newline]
    if body_text:
        parts.append(newline)
    parts.append(body_text)
    return "".join(parts)
