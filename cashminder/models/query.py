from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from cashminder.models.dates import to_local_naive


class TransactionQuery(BaseModel):
    """
    Validated filter for listing a user's transactions. Built at the edge
    (HTTP handler, service call) before any storage query is issued.
    """

    user_id: str = Field(min_length=1)
    category_id: Optional[str] = None
    type: Optional[Literal["income", "expense"]] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    limit: int = Field(default=100, ge=1, le=1000)

    @field_validator("start_date", "end_date")
    @classmethod
    def normalize_dates(cls, value):
        return to_local_naive(value)

    @model_validator(mode="after")
    def check_range(self) -> "TransactionQuery":
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        return self

    def matches(self, transaction) -> bool:
        if transaction.user_id != self.user_id:
            return False
        if self.category_id and transaction.category_id != self.category_id:
            return False
        if self.type == "income" and not transaction.is_income:
            return False
        if self.type == "expense" and transaction.is_income:
            return False
        if self.start_date and transaction.date < self.start_date:
            return False
        if self.end_date and transaction.date > self.end_date:
            return False
        return True

    def apply(self, transactions):
        matched = [t for t in transactions if self.matches(t)]
        matched.sort(key=lambda t: t.date, reverse=True)
        return matched[: self.limit]


class OwnerQuery(BaseModel):
    """Records belonging to one user, optionally with the shared (ownerless) ones."""

    user_id: str = Field(min_length=1)
    include_shared: bool = False

    def matches(self, record) -> bool:
        owner = getattr(record, "user_id", None)
        if owner is None:
            return self.include_shared
        return owner == self.user_id

    def apply(self, records):
        return [r for r in records if self.matches(r)]
