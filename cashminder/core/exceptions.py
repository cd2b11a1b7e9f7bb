"""
Exception types shared by the analytics core, the ledger service and the
repositories. Each carries a machine readable ``code`` that the HTTP layer
maps onto a status code.
"""
from typing import Optional


class CashminderError(Exception):
    code = "CASHMINDER_ERROR"

    def __init__(self, message: str, code: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        if code:
            self.code = code


class ValidationError(CashminderError):
    code = "VALIDATION_ERROR"


class InvalidTimeRangeError(ValidationError):
    code = "INVALID_TIME_RANGE"


class CategoryDirectionError(ValidationError):
    """Raised when an income transaction points at an expense category or vice versa."""

    code = "CATEGORY_DIRECTION_MISMATCH"


class NotFoundError(CashminderError):
    code = "NOT_FOUND"

    def __init__(self, entity: str, entity_id: str) -> None:
        super().__init__(f"{entity} not found: {entity_id}")
        self.entity = entity
        self.entity_id = entity_id


class RepositoryError(CashminderError):
    code = "REPOSITORY_ERROR"
