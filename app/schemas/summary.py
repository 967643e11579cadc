
from datetime import datetime
from pydantic import BaseModel, Field

class SummaryRequest(BaseModel):
    document_id: int | None = Field(None, alias="documentId")
    content: str | None = None
    model: str | None = None
    force_refresh: bool = Field(False, alias="forceRefresh")

    class Config:
        populate_by_name = True

class SummaryResponse(BaseModel):
    summary: str
    cached: bool
    timestamp: datetime
    model: str
    stale: bool = False

class SummaryOut(BaseModel):
    id: int
    document_id: int = Field(serialization_alias="documentId")
    content: str
    model: str
    stale: bool
    generated_at: datetime = Field(serialization_alias="generatedAt")

    class Config:
        from_attributes = True

class ModelInfo(BaseModel):
    name: str
    description: str

class ModelsOut(BaseModel):
    models: dict[str, ModelInfo]
