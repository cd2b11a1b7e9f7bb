from datetime import datetime
from typing import List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator

from cashminder.models.dates import to_local_naive


class TransactionCreate(BaseModel):
    amount: float = Field(ge=0)
    description: str = ""
    category_id: str
    date: datetime = Field(default_factory=datetime.now)
    is_income: bool = False
    payment_method: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    notes: Optional[str] = None

    @field_validator("date")
    @classmethod
    def normalize_dates(cls, value):
        return to_local_naive(value)


class TransactionUpdate(BaseModel):
    amount: Optional[float] = Field(default=None, ge=0)
    description: Optional[str] = None
    category_id: Optional[str] = None
    date: Optional[datetime] = None
    is_income: Optional[bool] = None
    payment_method: Optional[str] = None
    tags: Optional[List[str]] = None
    notes: Optional[str] = None

    @field_validator("date")
    @classmethod
    def normalize_dates(cls, value):
        return to_local_naive(value)


class Transaction(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid4()))
    user_id: str
    amount: float = Field(ge=0)  # direction lives in is_income, never in the sign
    description: str = ""
    category_id: str
    date: datetime
    is_income: bool
    created_at: datetime = Field(default_factory=datetime.now)
    payment_method: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    notes: Optional[str] = None

    @field_validator("date", "created_at")
    @classmethod
    def normalize_dates(cls, value):
        return to_local_naive(value)
