"""Header block codec: a restricted ``key: value`` subset of YAML.

    title: "Code Review"
    tags: ["review", "engineering"]
    description: "Ask for a focused review"
    use_count: 3
    last_used: 2026-01-05T09:12:44Z
    created_at: 2026-01-01T10:00:00Z
    updated_at: 2026-01-05T09:12:44Z

One scalar or one flat ``[a, b]`` list per line, no nesting. ``#`` lines are
comments. Decoding is two steps: scan_header() turns lines into a raw mapping,
decode_header() pulls typed fields out of it with defaults. Unknown keys are
dropped, malformed lines are skipped, decoding never raises.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class Header:
    """Typed header fields, in emit order. None means the key is omitted."""

    title: str = ""
    tags: list[str] = field(default_factory=list)
    description: str | None = None
    use_count: int = 0
    last_used: str | None = None
    created_at: str = ""
    updated_at: str = ""


# ---------------------------------------------------------------------------
# Scan
# ---------------------------------------------------------------------------


def _unquote(value: str, quotes: str = '"') -> str:
    """Strip one surrounding pair of matching quotes, verbatim."""
    if len(value) >= 2 and value[0] == value[-1] and value[0] in quotes:
        return value[1:-1]
    return value


def _parse_list(value: str) -> list[str]:
    inner = value[1:-1]
    items = (_unquote(part.strip(), "\"'") for part in inner.split(","))
    return [item for item in items if item]


def scan_header(text: str) -> dict[str, str | list[str]]:
    """Scan header lines into a raw key → value mapping.

    Values of the form ``[a, b]`` become lists, everything else is a string
    with one layer of double quotes removed. Later duplicates win.
    """
    raw: dict[str, str | list[str]] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or ":" not in line:
            continue
        key, _, value = line.partition(":")
        key = key.strip()
        value = value.strip()
        if not key:
            continue
        if value.startswith("[") and value.endswith("]"):
            raw[key] = _parse_list(value)
        else:
            raw[key] = _unquote(value)
    return raw


# ---------------------------------------------------------------------------
# Typed decode
# ---------------------------------------------------------------------------


def _as_str(value: str | list[str] | None) -> str | None:
    if value is None:
        return None
    if isinstance(value, list):
        return ", ".join(value)
    return value


def _as_count(value: str | list[str] | None) -> int:
    if not isinstance(value, str):
        return 0
    try:
        count = int(value)
    except ValueError:
        return 0
    return max(count, 0)


def decode_header(text: str) -> Header:
    """Decode a header block. Missing or malformed fields fall back to defaults."""
    raw = scan_header(text)
    tags = raw.get("tags")
    return Header(
        title=_as_str(raw.get("title")) or "",
        tags=list(tags) if isinstance(tags, list) else [],
        description=_as_str(raw.get("description")),
        use_count=_as_count(raw.get("use_count")),
        last_used=_as_str(raw.get("last_used")),
        created_at=_as_str(raw.get("created_at")) or "",
        updated_at=_as_str(raw.get("updated_at")) or "",
    )


# ---------------------------------------------------------------------------
# Encode
# ---------------------------------------------------------------------------


def _one_line(value: str) -> str:
    return " ".join(value.splitlines())


def encode_header(header: Header) -> str:
    """Render header lines in the fixed key order (no delimiters, no trailing newline)."""
    lines = [f'title: "{_one_line(header.title)}"']
    tags = ", ".join(f'"{_one_line(t)}"' for t in header.tags)
    lines.append(f"tags: [{tags}]")
    if header.description is not None:
        lines.append(f'description: "{_one_line(header.description)}"')
    lines.append(f"use_count: {header.use_count}")
    if header.last_used is not None:
        lines.append(f"last_used: {header.last_used}")
    lines.append(f"created_at: {header.created_at}")
    lines.append(f"updated_at: {header.updated_at}")
    return "\n".join(lines)
