from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from app.db.session import get_db
from app.core.dependencies import get_group_or_404
from app.services.group_services import (
    create_group,
    list_groups,
    delete_group,
    add_member,
    list_members,
    delete_member,
)
from app.schemas.group import GroupCreate, GroupOut, GroupMemberCreate, GroupMemberOut

router = APIRouter()
member_router = APIRouter()

@router.get("", response_model=list[GroupOut])
async def all_groups(db: AsyncSession = Depends(get_db)):
    return await list_groups(db)

@router.post("", response_model=GroupOut, status_code=201)
async def create_new_group(data: GroupCreate, db: AsyncSession = Depends(get_db)):
    return await create_group(db, data.name, data.type)

@router.get("/{group_id}", response_model=GroupOut)
async def get_group(group=Depends(get_group_or_404)):
    return group

@router.delete("/{group_id}")
async def remove_group(group_id: int, db: AsyncSession = Depends(get_db)):
    return await delete_group(db, group_id)

@router.get("/{group_id}/members", response_model=list[GroupMemberOut])
async def group_members(group_id: int, db: AsyncSession = Depends(get_db)):
    return await list_members(db, group_id)

@router.post("/{group_id}/members", response_model=GroupMemberOut, status_code=201)
async def add_member_to_group(group_id: int, data: GroupMemberCreate, db: AsyncSession = Depends(get_db)):
    return await add_member(db, group_id, data.name)

@member_router.delete("/{member_id}")
async def remove_member(member_id: int, db: AsyncSession = Depends(get_db)):
    return await delete_member(db, member_id)
