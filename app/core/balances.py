from decimal import Decimal
from types import MappingProxyType
from typing import Iterable, Mapping, Sequence
from app.core.utils import to_decimal
from app.schemas.balances import ExpenseContribution, MemberRef


def aggregate_balances(
    members: Sequence[MemberRef],
    contributions: Iterable[ExpenseContribution],
) -> Mapping[int, Decimal]:
    """
    Fold contribution rows into a net balance per member.

    net_balance = total_paid - total_owed

    Every member gets an entry, in the order given, even with no activity.
    The payer is credited once per expense no matter how many split rows
    the expense produced. Rows pointing at members that are no longer in
    the group are skipped for that side only.
    """
    balances = {m.id: Decimal("0") for m in members}
    credited = {}  # expense_id -> (payer_id, amount)

    for row in contributions:
        amount = to_decimal(row.expense_amount)

        seen = credited.get(row.expense_id)
        if seen is None:
            credited[row.expense_id] = (row.payer_id, amount)
            if row.payer_id in balances:
                balances[row.payer_id] += amount
        elif seen != (row.payer_id, amount):
            raise ValueError(
                f"Contribution rows for expense {row.expense_id} disagree on payer or amount"
            )

        if row.participant_id is not None and row.participant_id in balances:
            balances[row.participant_id] -= to_decimal(row.split_amount)

    return MappingProxyType(balances)
