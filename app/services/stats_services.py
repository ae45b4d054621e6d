from decimal import Decimal
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.dependencies import fetch_group
from app.core.utils import qround
from app.models.expense import Expense

def _money(value) -> float:
    return float(qround(Decimal(str(value or 0))))

async def get_group_stats(db: AsyncSession, group_id: int):
    await fetch_group(db, group_id)

    live = (Expense.group_id == group_id, Expense.is_deleted == False)

    overall_q = select(
        func.count(Expense.id).label("total_expenses"),
        func.coalesce(func.sum(Expense.amount), 0).label("total_amount"),
        func.coalesce(func.avg(Expense.amount), 0).label("avg_amount"),
    ).where(*live)

    category_q = (
        select(
            Expense.category,
            func.count(Expense.id).label("category_count"),
            func.coalesce(func.sum(Expense.amount), 0).label("category_amount"),
        )
        .where(*live)
        .group_by(Expense.category)
        .order_by(Expense.category)
    )

    overall = (await db.execute(overall_q)).one()
    category_res = await db.execute(category_q)

    return {
        "overall": {
            "total_expenses": overall.total_expenses,
            "total_amount": _money(overall.total_amount),
            "avg_amount": _money(overall.avg_amount),
        },
        "by_category": [
            {
                "category": row.category,
                "category_count": row.category_count,
                "category_amount": _money(row.category_amount),
            }
            for row in category_res
        ],
    }
