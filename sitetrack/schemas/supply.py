from pydantic import BaseModel, Field
from typing import Optional, List, Literal
from datetime import datetime

SupplyStatus = Literal["requested", "approved", "separating", "delivering", "delivered", "cancelled"]
SupplyPriority = Literal["low", "medium", "high"]


class SupplyItem(BaseModel):
    id: str
    name: str
    quantity: float
    unit: str = "un"
    checked: bool = False


class SupplyOrderCreate(BaseModel):
    title: str = Field(min_length=1)
    priority: SupplyPriority = "medium"
    items: List[SupplyItem] = Field(default_factory=list)


class SupplyOrderUpdate(BaseModel):
    title: Optional[str] = None
    priority: Optional[SupplyPriority] = None
    items: Optional[List[SupplyItem]] = None


class SupplyStatusChange(BaseModel):
    status: SupplyStatus


class SupplyCommentCreate(BaseModel):
    content: str = Field(min_length=1)


class SupplyComment(BaseModel):
    id: int
    order_id: int
    content: str
    created_by: str
    created_at: datetime

    class Config:
        from_attributes = True


class SupplyOrder(BaseModel):
    id: int
    project_id: int
    title: str
    priority: str
    items: List[SupplyItem]
    status: str
    created_by: str
    created_at: datetime
    updated_at: datetime
    comments: List[SupplyComment] = Field(default_factory=list)

    class Config:
        from_attributes = True


class SupplyImportRequest(BaseModel):
    csv_content: str = Field(min_length=1)
