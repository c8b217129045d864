"""Derive document ids (filename stems) from titles."""

from __future__ import annotations

from promptshelf.errors import ValidationError

_SEPARATORS = "-_"


def _map_char(c: str) -> str:
    if (c.isascii() and c.isalnum()) or c in _SEPARATORS:
        return c.lower()
    if c.isspace():
        return "-"
    return "_"


def derive_id(title: str) -> str:
    """Map a title to an id of ``[a-z0-9_-]`` characters.

    Whitespace becomes ``-``, any other character outside the set becomes
    ``_``, then leading/trailing separators are trimmed:

        derive_id("My Prompt")      -> "my-prompt"
        derive_id("Hello, World!")  -> "hello_-world"
        derive_id("!!!")            -> ""

    Distinct titles can map to the same id.
    """
    return "".join(_map_char(c) for c in title).strip(_SEPARATORS)


def validate_id(doc_id: str) -> str:
    """Reject ids that are empty or would resolve outside a collection directory."""
    if not doc_id or not doc_id.strip():
        msg = "document id must not be empty"
        raise ValidationError(msg)
    if "/" in doc_id or "\\" in doc_id or doc_id in {".", ".."}:
        msg = f"invalid document id: {doc_id!r}"
        raise ValidationError(msg)
    return doc_id
