"""Structured errors raised when decorating or configuring a table."""

from __future__ import annotations
from typing import Any


class TableError(Exception):
    """Base class for table decoration / configuration issues."""

    def __init__(self, message: str, *, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.context = context or {}


class NotATableError(TableError):
    """Raised when a component is asked to decorate an element that is not a <table>."""


class AlreadyAttachedError(TableError):
    """Raised when a component that already decorates a table is attached again."""


class MissingHeaderError(TableError):
    """Raised when a sortable table has no header row."""


class ColumnOutOfRangeError(TableError):
    """Raised when a sort is requested for a column the header does not have."""


class UnknownParserError(TableError):
    """Raised when a parser id is not present in the registry."""


class DuplicateParserError(TableError):
    """Raised when two parsers in one registry share an id."""


class MissingTerminalParserError(TableError):
    """Raised when a registry does not end with the catch-all text parser."""
