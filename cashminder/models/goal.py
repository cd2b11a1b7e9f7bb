from datetime import datetime
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator

from cashminder.models.dates import to_local_naive


class SavingsGoal(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid4()))
    user_id: str
    name: str
    target_amount: float = Field(gt=0)
    current_amount: float = Field(default=0.0, ge=0)
    target_date: Optional[datetime] = None
    created_at: datetime = Field(default_factory=datetime.now)

    @field_validator("target_date", "created_at")
    @classmethod
    def normalize_dates(cls, value):
        return to_local_naive(value)
