from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from app.db.session import get_db
from app.schemas.balances import GroupBalanceOut, MemberBalance, Settlement
from app.schemas.stats import GroupStatsOut
from app.services.settlement_service import (
    get_group_balances,
    get_group_settlements,
    get_group_summary,
)
from app.services.stats_services import get_group_stats

router = APIRouter()


@router.get("/{group_id}/balances", response_model=dict[int, MemberBalance])
async def balances(group_id: int, db: AsyncSession = Depends(get_db)):
    return await get_group_balances(db, group_id)


@router.get("/{group_id}/settlements", response_model=list[Settlement])
async def settlements(group_id: int, db: AsyncSession = Depends(get_db)):
    return await get_group_settlements(db, group_id)


@router.get("/{group_id}/summary", response_model=GroupBalanceOut)
async def summary(group_id: int, db: AsyncSession = Depends(get_db)):
    return await get_group_summary(db, group_id)


@router.get("/{group_id}/stats", response_model=GroupStatsOut)
async def stats(group_id: int, db: AsyncSession = Depends(get_db)):
    return await get_group_stats(db, group_id)
