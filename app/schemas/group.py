from pydantic import BaseModel, Field
from datetime import datetime

class GroupCreate(BaseModel):
    name: str = Field(min_length=1)
    type: str = Field(min_length=1)

class GroupOut(BaseModel):
    id: int
    name: str
    type: str
    created_at: datetime | None = None

    class Config:
        from_attributes = True

class GroupMemberCreate(BaseModel):
    name: str = Field(min_length=1)

class GroupMemberOut(BaseModel):
    id: int
    group_id: int
    name: str
    joined_at: datetime | None = None

    class Config:
        from_attributes = True
