from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, Field


class Category(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid4()))
    user_id: Optional[str] = None  # None for the shared default categories
    name: str
    color: Optional[str] = None
    icon: Optional[str] = None
    is_income: bool
    is_default: bool = False
