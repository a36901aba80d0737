from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
import datetime


class CategoryBase(BaseModel):
    nombre: str = Field(..., min_length=1, max_length=100, description="Name of the category")
    descripcion: Optional[str] = Field(None, max_length=500, description="Optional description")


class CategoryCreate(CategoryBase):
    padre_id: Optional[int] = Field(None, description="Id of the parent category; omit for a root category")


class CategoryUpdate(BaseModel):
    nombre: Optional[str] = Field(None, min_length=1, max_length=100, description="New name of the category")
    descripcion: Optional[str] = Field(None, max_length=500, description="New description")
    padre_id: Optional[int] = Field(None, description="New parent id; null turns the category into a root")


class CategoryResponse(CategoryBase):
    id: int = Field(..., description="Server-assigned identifier")
    padre_id: Optional[int] = Field(None, description="Parent category id, null for roots")
    padre_nombre: Optional[str] = Field(None, description="Name of the parent category")
    created_at: datetime.datetime
    updated_at: datetime.datetime

    model_config = ConfigDict(protected_namespaces=())


class CategoryNode(CategoryResponse):
    hijos: List["CategoryNode"] = Field(default_factory=list, description="Direct children, in input order")


CategoryNode.model_rebuild()
