from pydantic import BaseModel, Field
from typing import Optional, Literal
from datetime import datetime

DocumentCategory = Literal["structural", "architectural", "electrical", "hydraulic", "finishing", "others"]
PhotoCategory = Literal["evolution", "structural", "installations", "finishing", "inspection", "other"]


class ProjectDocumentUpdate(BaseModel):
    title: Optional[str] = None
    category: Optional[DocumentCategory] = None
    context: Optional[str] = None


class ProjectDocument(BaseModel):
    id: int
    project_id: int
    title: str
    category: str
    context: Optional[str] = None
    file_url: str
    file_type: Optional[str] = None
    created_by: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class ProjectPhotoUpdate(BaseModel):
    description: Optional[str] = None
    category: Optional[PhotoCategory] = None
    location_label: Optional[str] = None
    phase_id: Optional[str] = None


class ExecutionPhotoUpdate(BaseModel):
    description: str = Field(min_length=1)


class ProjectPhoto(BaseModel):
    id: int
    project_id: int
    url: str
    description: Optional[str] = None
    category: str
    location_label: Optional[str] = None
    phase_id: Optional[str] = None
    created_by: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
