# app/core/errors.py
from __future__ import annotations

from typing import Optional


class DataAccessError(Exception):
    """The store is unreachable, rejected a query, or the connection failed."""


class RowShapeError(DataAccessError):
    """A row returned by the store does not match the expected record shape."""

    def __init__(self, query_name: str, row: object, reason: str):
        super().__init__(f"{query_name}: unexpected row shape ({reason})")
        self.query_name = query_name
        self.row = row


class ReportAssemblyError(Exception):
    """
    A report build failed because one of its reads failed.
    Carries no partial results, only the vertical and the cause.
    """

    def __init__(self, vertical: str, cause: Optional[BaseException] = None):
        super().__init__(f"Failed to build {vertical} report: {cause}")
        self.vertical = vertical
        self.cause = cause
