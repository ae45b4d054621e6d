from decimal import Decimal
from datetime import datetime
from pydantic import BaseModel, Field
from typing import Annotated, List, Literal

# matches the Numeric(12, 2) money columns
Money = Annotated[Decimal, Field(gt=0, max_digits=12, decimal_places=2)]
Percentage = Annotated[Decimal, Field(gt=0, le=100, max_digits=7, decimal_places=4)]

class SplitInput(BaseModel):
    member_id: int
    # custom splits carry an amount, percentage splits a percentage,
    # equal splits neither
    amount: Money | None = None
    percentage: Percentage | None = None

class ExpenseCreate(BaseModel):
    description: str = Field(min_length=1)
    amount: Money
    paid_by: int
    category: str = Field(min_length=1)
    split_type: Literal["equal", "percentage", "custom"]
    splits: List[SplitInput] = Field(min_length=1)

class ExpenseUpdate(ExpenseCreate):
    pass

class SplitOut(BaseModel):
    member_id: int
    amount: float

    class Config:
        from_attributes = True

class ExpenseOut(BaseModel):
    id: int
    group_id: int
    description: str
    amount: float
    paid_by: int
    category: str
    split_type: str
    created_at: datetime | None = None
    splits: List[SplitOut]

    class Config:
        from_attributes = True
