import logging
from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from app.core.dependencies import fetch_group
from app.models.group import Group
from app.models.group_member import GroupMember

logger = logging.getLogger(__name__)

async def create_group(db: AsyncSession, name: str, type: str):
    group = Group(name=name, type=type)
    db.add(group)
    await db.commit()
    await db.refresh(group)

    logger.info(f"Created group {group.id} ({group.name})")
    return group

async def list_groups(db: AsyncSession):
    q = (
        select(Group)
        .where(Group.is_deleted == False)
        .order_by(Group.created_at.desc(), Group.id.desc())
    )
    result = await db.execute(q)
    return result.scalars().all()

async def delete_group(db: AsyncSession, group_id: int):
    group = await fetch_group(db, group_id)

    group.is_deleted = True
    await db.commit()

    logger.info(f"Deleted group {group_id}")
    return {"message": "Group deleted successfully"}

async def add_member(db: AsyncSession, group_id: int, name: str):
    await fetch_group(db, group_id)

    member = GroupMember(group_id=group_id, name=name)
    db.add(member)
    await db.commit()
    await db.refresh(member)

    logger.info(f"Added member {member.id} ({name}) to group {group_id}")
    return member

async def list_members(db: AsyncSession, group_id: int):
    await fetch_group(db, group_id)

    q = (
        select(GroupMember)
        .where(GroupMember.group_id == group_id)
        .order_by(GroupMember.name, GroupMember.id)
    )
    result = await db.execute(q)
    return result.scalars().all()

async def delete_member(db: AsyncSession, member_id: int):
    # expenses and splits keep pointing at the removed member id,
    # balance math skips ids that are not in the group
    q = (
        select(GroupMember)
        .join(Group, Group.id == GroupMember.group_id)
        .where(GroupMember.id == member_id, Group.is_deleted == False)
    )
    res = await db.execute(q)
    member = res.scalar_one_or_none()

    if not member:
        raise HTTPException(404, "Member not found")

    await db.delete(member)
    await db.commit()

    logger.info(f"Removed member {member_id} from group {member.group_id}")
    return {"message": "Member deleted successfully"}
