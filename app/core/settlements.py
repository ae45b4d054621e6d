from decimal import Decimal
from typing import List, Mapping, NamedTuple
from app.core.exceptions import SettlementConsistencyError
from app.core.utils import TOLERANCE, qround


class Transfer(NamedTuple):
    debtor_id: int
    creditor_id: int
    amount: Decimal


def minimize_settlements(
    balances: Mapping[int, Decimal],
    tolerance: Decimal = TOLERANCE,
) -> List[Transfer]:
    """
    Greedy two-pointer matching of debtors against creditors.

    Creditors and debtors keep the order of `balances` (member order) and
    are never sorted, so the same input always yields the same plan. The
    result has at most (members with a nonzero balance - 1) transfers but
    is not guaranteed to be the minimum possible count.

    Raises SettlementConsistencyError if anything is left unmatched.
    """
    creditors = []
    debtors = []

    for mid, bal in balances.items():
        if bal > tolerance:
            creditors.append([mid, bal])
        elif bal < -tolerance:
            debtors.append([mid, -bal])

    transfers: List[Transfer] = []
    i = 0
    j = 0

    while i < len(creditors) and j < len(debtors):
        cred_id, cred_amt = creditors[i]
        debt_id, debt_amt = debtors[j]

        amount = min(cred_amt, debt_amt)
        transfers.append(Transfer(debt_id, cred_id, qround(amount)))

        # keep full precision in what is left, only the emitted amount is rounded
        creditors[i][1] = cred_amt - amount
        debtors[j][1] = debt_amt - amount

        if creditors[i][1] <= tolerance:
            i += 1
        if debtors[j][1] <= tolerance:
            j += 1

    residual = {mid: qround(amt) for mid, amt in creditors[i:] if amt > tolerance}
    residual.update(
        (mid, -qround(amt)) for mid, amt in debtors[j:] if amt > tolerance
    )
    if residual:
        raise SettlementConsistencyError(residual)

    return transfers


def is_settled(balances: Mapping[int, Decimal], tolerance: Decimal = TOLERANCE) -> bool:
    """A group is settled when every balance is within `tolerance` of zero."""
    return all(abs(amount) <= tolerance for amount in balances.values())
