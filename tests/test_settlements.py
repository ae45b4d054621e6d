import random
from collections import defaultdict
from decimal import Decimal

import pytest

from app.core.balances import aggregate_balances
from app.core.exceptions import SettlementConsistencyError
from app.core.settlements import Transfer, is_settled, minimize_settlements
from app.core.utils import TOLERANCE, split_equally
from app.schemas.balances import ExpenseContribution, MemberRef


def D(value):
    return Decimal(str(value))


def apply_transfers(balances, transfers):
    remaining = defaultdict(Decimal, balances)
    for t in transfers:
        remaining[t.debtor_id] += t.amount
        remaining[t.creditor_id] -= t.amount
    return remaining


def random_group(rng, size, expense_count):
    group = [MemberRef(id=i, name=f"m{i}") for i in range(1, size + 1)]
    rows = []

    for expense_id in range(1, expense_count + 1):
        payer = rng.choice(group).id
        participants = rng.sample([m.id for m in group], rng.randint(1, size))
        amount = Decimal(rng.randint(1, 50000)) / 100

        for member_id, share in zip(participants, split_equally(amount, len(participants))):
            rows.append(
                ExpenseContribution(
                    expense_id=expense_id,
                    payer_id=payer,
                    expense_amount=amount,
                    participant_id=member_id,
                    split_amount=share,
                )
            )

    return group, rows


def test_worked_example():
    balances = {1: D(60), 2: D(-15), 3: D(-45)}

    transfers = minimize_settlements(balances)

    assert transfers == [
        Transfer(debtor_id=2, creditor_id=1, amount=D("15.00")),
        Transfer(debtor_id=3, creditor_id=1, amount=D("45.00")),
    ]


def test_two_person_debt():
    assert minimize_settlements({1: D(-100), 2: D(100)}) == [Transfer(1, 2, D("100.00"))]


def test_empty_and_all_zero_balances():
    assert minimize_settlements({}) == []
    assert minimize_settlements({1: D(0), 2: D(0), 3: D(0)}) == []


def test_keeps_member_order_instead_of_sorting_by_size():
    # sorting by magnitude would pay member 2 first
    balances = {1: D(5), 2: D(20), 3: D(-25)}

    transfers = minimize_settlements(balances)

    assert transfers == [Transfer(3, 1, D("5.00")), Transfer(3, 2, D("20.00"))]


def test_both_cursors_advance_on_exact_match():
    balances = {1: D(50), 2: D(-50), 3: D(30), 4: D(-30)}

    transfers = minimize_settlements(balances)

    assert transfers == [Transfer(2, 1, D("50.00")), Transfer(4, 3, D("30.00"))]


def test_zero_balance_members_never_appear():
    balances = {1: D(40), 2: D(0), 3: D(-40), 4: D(0)}

    transfers = minimize_settlements(balances)

    involved = {t.debtor_id for t in transfers} | {t.creditor_id for t in transfers}
    assert involved == {1, 3}


def test_dead_zone_balances_are_settled():
    balances = {1: D("0.01"), 2: D("-0.005"), 3: D("-0.005")}

    assert minimize_settlements(balances) == []
    assert is_settled(balances)


def test_emitted_amounts_are_rounded_half_up():
    transfers = minimize_settlements({1: D("10.005"), 2: D("-10.005")})

    assert transfers == [Transfer(2, 1, D("10.01"))]


def test_unrounded_remainders_carry_forward():
    third = D(100) / D(3)
    balances = {1: D(100) - third, 2: -third, 3: -third}

    transfers = minimize_settlements(balances)

    assert transfers == [Transfer(2, 1, D("33.33")), Transfer(3, 1, D("33.33"))]


def test_residual_imbalance_raises():
    with pytest.raises(SettlementConsistencyError) as exc_info:
        minimize_settlements({1: D(10), 2: D(-4)})

    assert exc_info.value.residual == {1: D("6.00")}


def test_residual_debt_is_reported_negative():
    with pytest.raises(SettlementConsistencyError) as exc_info:
        minimize_settlements({1: D(-10), 2: D(3)})

    assert exc_info.value.residual == {1: D("-7.00")}


def test_is_settled():
    assert is_settled({})
    assert not is_settled({1: D("0.02"), 2: D("-0.02")})


def test_deterministic_output():
    balances = {1: D("12.50"), 2: D("-7.25"), 3: D("30"), 4: D("-35.25")}

    assert minimize_settlements(balances) == minimize_settlements(dict(balances))


@pytest.mark.parametrize("seed", range(25))
def test_random_groups_settle_completely(seed):
    rng = random.Random(seed)
    group, rows = random_group(rng, size=rng.randint(2, 9), expense_count=rng.randint(1, 15))

    balances = aggregate_balances(group, rows)
    transfers = minimize_settlements(balances)

    # conservation
    assert abs(sum(balances.values())) <= TOLERANCE

    # applying the plan zeroes everyone
    remaining = apply_transfers(balances, transfers)
    assert all(abs(amount) <= TOLERANCE for amount in remaining.values())

    # every transfer moves money from a debtor to a creditor
    for t in transfers:
        assert t.amount > 0
        assert balances[t.debtor_id] < 0 < balances[t.creditor_id]

    nonzero = sum(1 for amount in balances.values() if abs(amount) > TOLERANCE)
    assert len(transfers) <= max(nonzero - 1, 0)
