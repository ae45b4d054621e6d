from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from app.db.session import get_db
from app.schemas.expense import ExpenseCreate, ExpenseOut, ExpenseUpdate
from app.services.expense_services import (
    create_expense,
    delete_expense,
    get_expense,
    get_expenses_by_group,
    update_expense,
)

router = APIRouter()
group_expense_router = APIRouter()

@group_expense_router.post("/{group_id}/expenses", response_model=ExpenseOut, status_code=201)
async def add_expense(group_id: int, data: ExpenseCreate, db: AsyncSession = Depends(get_db)):
    return await create_expense(db, group_id, data)

@group_expense_router.get("/{group_id}/expenses", response_model=list[ExpenseOut])
async def all_expenses(group_id: int, db: AsyncSession = Depends(get_db)):
    return await get_expenses_by_group(db, group_id)

@router.get("/{expense_id}", response_model=ExpenseOut)
async def fetch(expense_id: int, db: AsyncSession = Depends(get_db)):
    return await get_expense(db, expense_id)

@router.put("/{expense_id}", response_model=ExpenseOut)
async def edit(expense_id: int, data: ExpenseUpdate, db: AsyncSession = Depends(get_db)):
    return await update_expense(db, expense_id, data)

@router.delete("/{expense_id}")
async def del_expense(expense_id: int, db: AsyncSession = Depends(get_db)):
    return await delete_expense(db, expense_id)
