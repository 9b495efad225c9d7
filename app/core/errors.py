"""CHANLENS — Error Taxonomy.

"No data" and "no takeoff" are valid results, never errors. Only upstream
fetch failures and malformed input raise.
"""

from typing import Optional


class ChanlensError(Exception):
    """Base class for all CHANLENS errors."""


class DataFetchError(ChanlensError):
    """Raised when the snapshot store cannot deliver an entity's data."""

    def __init__(
        self, message: str, entity_id: Optional[str] = None, not_found: bool = False
    ):
        self.entity_id = entity_id
        self.not_found = not_found
        super().__init__(message)


class InvalidInputError(ChanlensError):
    """Raised on non-finite numbers or unsorted / duplicate-dated history."""
