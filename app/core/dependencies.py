from fastapi import Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from app.db.session import get_db
from app.models.group import Group
from app.models.group_member import GroupMember

async def fetch_group(db: AsyncSession, group_id: int) -> Group:
    q_group = select(Group).where(Group.id == group_id, Group.is_deleted == False)
    res_group = await db.execute(q_group)
    group = res_group.scalar_one_or_none()

    if not group:
        raise HTTPException(404, "Group not found")

    return group

async def get_group_or_404(group_id: int, db: AsyncSession = Depends(get_db)) -> Group:
    return await fetch_group(db, group_id)

async def fetch_group_member_ids(db: AsyncSession, group_id: int) -> set[int]:
    q_member = select(GroupMember.id).where(GroupMember.group_id == group_id)
    res_member = await db.execute(q_member)
    return {row[0] for row in res_member.all()}
