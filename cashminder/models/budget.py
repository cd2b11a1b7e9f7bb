from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator, model_validator

from cashminder.models.dates import to_local_naive


class BudgetPeriod(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class Budget(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid4()))
    user_id: str
    category_id: str
    amount: float = Field(gt=0)
    period: BudgetPeriod = BudgetPeriod.MONTHLY
    start_date: datetime
    end_date: Optional[datetime] = None
    created_at: datetime = Field(default_factory=datetime.now)

    @field_validator("start_date", "end_date", "created_at")
    @classmethod
    def normalize_dates(cls, value):
        return to_local_naive(value)

    @model_validator(mode="after")
    def check_dates(self) -> "Budget":
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self
