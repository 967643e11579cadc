
from datetime import datetime
from pydantic import BaseModel, Field
from app.schemas.document import FileIn

class ContentGroupCreate(BaseModel):
    name: str | None = None
    files: list[FileIn] | None = None

class ContentGroupOut(BaseModel):
    id: int
    name: str
    user_id: int = Field(serialization_alias="userId")
    created_at: datetime | None = Field(None, serialization_alias="createdAt")

    class Config:
        from_attributes = True
