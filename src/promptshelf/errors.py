"""promptshelf error hierarchy.

Every error raised by the store carries a stable ``code`` so a presentation
layer can branch on the kind without string matching:

    ShelfError
    ├── ShelfIOError        IO_ERROR          filesystem read/write/create failures
    ├── ValidationError     VALIDATION_ERROR  bad storage path, collection or id
    │   └── ConfigError                       unreadable promptshelf.toml (config.py)
    ├── NotFoundError       NOT_FOUND         operation targets a missing document
    └── ParseError          PARSE_ERROR       reserved; decoding never hard-fails
"""

from __future__ import annotations


class ShelfError(Exception):
    """Base class for all promptshelf errors."""

    code = "SHELF_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class ShelfIOError(ShelfError):
    code = "IO_ERROR"


class ValidationError(ShelfError):
    code = "VALIDATION_ERROR"


class NotFoundError(ShelfError):
    code = "NOT_FOUND"


class ParseError(ShelfError):
    code = "PARSE_ERROR"
