import logging
from decimal import Decimal
from typing import List, Tuple
from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from app.core.dependencies import fetch_group, fetch_group_member_ids
from app.core.utils import CENTS, qround, split_equally
from app.models.expense import Expense
from app.models.expense_split import ExpenseSplit
from app.schemas.expense import ExpenseCreate

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")


def build_split_amounts(data: ExpenseCreate) -> List[Tuple[int, Decimal]]:
    """
    Turn the request splits into (member_id, amount) pairs.

    Shares always add up to the expense amount so the payer's credit is
    fully allocated. Rounding leftovers land on the first participant.
    """
    member_ids = [s.member_id for s in data.splits]

    if len(member_ids) != len(set(member_ids)):
        raise HTTPException(400, "Duplicate members found in splits")

    amount = qround(data.amount)

    if amount <= 0:
        raise HTTPException(400, "Expense amount must be at least 0.01")

    if data.split_type == "equal":
        shares = split_equally(amount, len(member_ids))

    elif data.split_type == "percentage":
        if any(s.percentage is None for s in data.splits):
            raise HTTPException(400, "Every split needs a percentage")

        total_percent = sum(s.percentage for s in data.splits)
        if abs(total_percent - HUNDRED) > CENTS:
            raise HTTPException(400, f"Total percentage must equal 100 (got {total_percent})")

        shares = [qround(amount * s.percentage / HUNDRED) for s in data.splits]
        shares[0] += amount - sum(shares)

    else:
        if any(s.amount is None for s in data.splits):
            raise HTTPException(400, "Every split needs an amount")

        shares = [qround(s.amount) for s in data.splits]
        total_split = sum(shares)
        if abs(total_split - amount) > CENTS:
            raise HTTPException(
                400,
                f"Split total ({total_split}) must equal expense amount ({amount})"
            )
        shares[0] += amount - total_split

    if any(share <= 0 for share in shares):
        raise HTTPException(400, f"Every share must be at least 0.01 (amount {amount} is too small to split)")

    return list(zip(member_ids, shares))


async def validate_expense(db: AsyncSession, group_id: int, data: ExpenseCreate):
    await fetch_group(db, group_id)

    valid_member_ids = await fetch_group_member_ids(db, group_id)

    if data.paid_by not in valid_member_ids:
        raise HTTPException(400, "Payer is not a member of the group")

    if any(s.member_id not in valid_member_ids for s in data.splits):
        raise HTTPException(
            400,
            "One or more members in splits are not members of the group"
        )

    return build_split_amounts(data)


def serialize_expense(expense: Expense) -> dict:
    return {
        "id": expense.id,
        "group_id": expense.group_id,
        "description": expense.description,
        "amount": float(expense.amount),
        "paid_by": expense.paid_by,
        "category": expense.category,
        "split_type": expense.split_type,
        "created_at": expense.created_at,
        "splits": [
            {"member_id": s.member_id, "amount": float(s.amount)}
            for s in expense.splits
        ],
    }


async def fetch_expense(db: AsyncSession, expense_id: int) -> Expense:
    q = (
        select(Expense)
        .options(selectinload(Expense.splits))
        .where(Expense.id == expense_id, Expense.is_deleted == False)
        .execution_options(populate_existing=True)
    )
    res = await db.execute(q)
    expense = res.scalar_one_or_none()

    if not expense:
        raise HTTPException(404, "Expense not found")

    return expense


async def create_expense(db: AsyncSession, group_id: int, data: ExpenseCreate):
    split_amounts = await validate_expense(db, group_id, data)

    expense = Expense(
        group_id=group_id,
        description=data.description,
        amount=qround(data.amount),
        paid_by=data.paid_by,
        category=data.category,
        split_type=data.split_type,
    )

    db.add(expense)
    await db.flush()  # generates expense.id

    splits = [
        ExpenseSplit(
            expense_id=expense.id,
            member_id=member_id,
            amount=share
        )
        for member_id, share in split_amounts
    ]

    db.add_all(splits)
    await db.commit()

    logger.info(f"Created expense {expense.id} in group {group_id} for {expense.amount}")
    return serialize_expense(await fetch_expense(db, expense.id))


async def update_expense(db: AsyncSession, expense_id: int, data: ExpenseCreate):
    expense = await fetch_expense(db, expense_id)
    split_amounts = await validate_expense(db, expense.group_id, data)

    expense.description = data.description
    expense.amount = qround(data.amount)
    expense.paid_by = data.paid_by
    expense.category = data.category
    expense.split_type = data.split_type

    # old splits are orphaned and removed on flush
    expense.splits = [
        ExpenseSplit(member_id=member_id, amount=share)
        for member_id, share in split_amounts
    ]

    await db.commit()

    logger.info(f"Updated expense {expense_id}")
    return serialize_expense(await fetch_expense(db, expense_id))


async def delete_expense(db: AsyncSession, expense_id: int):
    expense = await fetch_expense(db, expense_id)

    expense.is_deleted = True
    await db.commit()

    logger.info(f"Deleted expense {expense_id}")
    return {"message": "Expense deleted successfully"}


async def get_expense(db: AsyncSession, expense_id: int):
    return serialize_expense(await fetch_expense(db, expense_id))


async def get_expenses_by_group(db: AsyncSession, group_id: int):
    await fetch_group(db, group_id)

    q = (
        select(Expense)
        .options(selectinload(Expense.splits))
        .where(
            Expense.group_id == group_id,
            Expense.is_deleted == False,
        )
        .order_by(
            Expense.created_at.desc(),
            Expense.id.desc(),
        )
    )

    res = await db.execute(q)
    return [serialize_expense(expense) for expense in res.scalars().all()]
