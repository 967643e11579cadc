
from datetime import datetime
from pydantic import BaseModel, Field

class FileIn(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    path: str = Field(min_length=1, max_length=1024)
    parent_path: str = Field("", alias="parentPath", max_length=1024)
    content: str = ""
    is_directory: bool = Field(False, alias="isDirectory")

    class Config:
        populate_by_name = True

class DocumentCreate(FileIn):
    group_id: int = Field(alias="groupId")

class DocumentUpdate(BaseModel):
    id: int | None = None
    content: str | None = None

class DocumentOut(BaseModel):
    id: int
    group_id: int = Field(serialization_alias="groupId")
    name: str
    path: str
    parent_path: str = Field(serialization_alias="parentPath")
    content: str
    is_directory: bool = Field(serialization_alias="isDirectory")
    created_at: datetime | None = Field(None, serialization_alias="createdAt")
    updated_at: datetime | None = Field(None, serialization_alias="updatedAt")

    class Config:
        from_attributes = True
