"""Exceptions raised while constructing schemas.

Validation failures are never raised; they are reported as results.
"""

from typing import Optional


class JsonSchemaError(Exception):
    """Base class for schema construction errors."""

    def __init__(self, message: str, pointer: Optional[str] = None):
        self.message = message
        self.pointer = pointer
        if pointer is not None:
            super().__init__(f"{message} at {pointer}")
        else:
            super().__init__(message)


class SchemaLoadError(JsonSchemaError):
    """Exception raised when a schema document is malformed."""


class UninitializedKeywordError(JsonSchemaError):
    """Exception raised when a keyword is used before it was given a value."""

    def __init__(self, keyword: str):
        super().__init__(f"Keyword `{keyword}` was used before it was given a value")
        self.keyword = keyword
