import logging
from decimal import Decimal
from typing import Dict, List, Mapping, Sequence
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.balances import aggregate_balances
from app.core.config import settings
from app.core.dependencies import fetch_group
from app.core.settlements import Transfer, is_settled, minimize_settlements
from app.core.utils import qround
from app.models.expense import Expense
from app.models.expense_split import ExpenseSplit
from app.models.group_member import GroupMember
from app.schemas.balances import (
    ExpenseContribution,
    GroupBalanceOut,
    MemberBalance,
    MemberRef,
    Settlement,
)

logger = logging.getLogger(__name__)


def format_balances(
    members: Sequence[MemberRef],
    balances: Mapping[int, Decimal],
) -> Dict[int, MemberBalance]:
    return {
        m.id: MemberBalance(name=m.name, balance=float(qround(balances[m.id])))
        for m in members
    }


def format_settlements(
    members: Sequence[MemberRef],
    transfers: Sequence[Transfer],
) -> List[Settlement]:
    names = {m.id: m.name for m in members}

    return [
        Settlement(
            from_id=t.debtor_id,
            from_name=names.get(t.debtor_id),
            to_id=t.creditor_id,
            to_name=names.get(t.creditor_id),
            amount=float(t.amount),
        )
        for t in transfers
    ]


async def load_group_snapshot(db: AsyncSession, group_id: int):
    """
    Read members and contribution rows for a group.

    Both reads go through the same session transaction so the ledger is
    computed from one point in time.

    Returns:
        (members ordered by id, contribution rows - one per split,
        or one without a participant for an expense with no splits)
    """
    await fetch_group(db, group_id)

    members_q = (
        select(GroupMember.id, GroupMember.name)
        .where(GroupMember.group_id == group_id)
        .order_by(GroupMember.id)
    )
    members_res = await db.execute(members_q)
    members = [MemberRef(id=row.id, name=row.name) for row in members_res]

    rows_q = (
        select(
            Expense.id.label("expense_id"),
            Expense.paid_by,
            Expense.amount,
            ExpenseSplit.member_id,
            ExpenseSplit.amount.label("split_amount"),
        )
        .outerjoin(ExpenseSplit, ExpenseSplit.expense_id == Expense.id)
        .where(Expense.group_id == group_id, Expense.is_deleted == False)
        .order_by(Expense.id, ExpenseSplit.id)
    )
    rows_res = await db.execute(rows_q)

    contributions = [
        ExpenseContribution(
            expense_id=row.expense_id,
            payer_id=row.paid_by,
            expense_amount=Decimal(str(row.amount)),
            participant_id=row.member_id,
            split_amount=None if row.split_amount is None else Decimal(str(row.split_amount)),
        )
        for row in rows_res
    ]

    return members, contributions


async def get_group_net_balances(db: AsyncSession, group_id: int):
    members, contributions = await load_group_snapshot(db, group_id)
    return members, aggregate_balances(members, contributions)


async def get_group_balances(db: AsyncSession, group_id: int):
    members, balances = await get_group_net_balances(db, group_id)
    return format_balances(members, balances)


async def get_group_settlements(db: AsyncSession, group_id: int):
    members, balances = await get_group_net_balances(db, group_id)
    transfers = minimize_settlements(balances, settings.SETTLEMENT_TOLERANCE)

    logger.info(f"Group {group_id}: {len(transfers)} settlement(s) for {len(members)} member(s)")
    return format_settlements(members, transfers)


async def get_group_summary(db: AsyncSession, group_id: int) -> GroupBalanceOut:
    members, balances = await get_group_net_balances(db, group_id)
    transfers = minimize_settlements(balances, settings.SETTLEMENT_TOLERANCE)

    return GroupBalanceOut(
        net=format_balances(members, balances),
        settlements=format_settlements(members, transfers),
        settled=is_settled(balances, settings.SETTLEMENT_TOLERANCE),
    )
