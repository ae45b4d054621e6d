from decimal import Decimal
from pydantic import BaseModel, ConfigDict, model_validator

class MemberRef(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: int
    name: str

class ExpenseContribution(BaseModel):
    """One (expense, split) row. An expense without splits has a single row with no participant."""
    model_config = ConfigDict(frozen=True)

    expense_id: int
    payer_id: int | None
    expense_amount: Decimal
    participant_id: int | None = None
    split_amount: Decimal | None = None

    @model_validator(mode="after")
    def check_split(self):
        if self.participant_id is not None and self.split_amount is None:
            raise ValueError("split_amount is required when participant_id is set")
        return self

class MemberBalance(BaseModel):
    name: str
    balance: float

class Settlement(BaseModel):
    from_id: int
    from_name: str | None
    to_id: int
    to_name: str | None
    amount: float

class GroupBalanceOut(BaseModel):
    net: dict[int, MemberBalance]
    settlements: list[Settlement]
    settled: bool
