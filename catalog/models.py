# catalog/models.py

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import datetime, timezone


class CamelModel(BaseModel):
  """Serializes with camelCase keys, accepts both camelCase and snake_case"""
  model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class ProductRecord(CamelModel):
  """One product as produced by the bulk import, before it is stored"""
  name: str
  description: str
  price: float
  images: List[str] = Field(default_factory=list)
  tags: List[str] = Field(default_factory=list)
  category: str
  stock: int = 0
  created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ProductCreate(CamelModel):
  model_config = ConfigDict(str_strip_whitespace=True)

  name: str = Field(..., min_length=1, description="Product name")
  description: str = Field(..., min_length=1, description="Product description")
  price: float = Field(..., ge=0, description="Price in dollars")
  images: List[str] = Field(default_factory=list, description="Image URLs")
  tags: List[str] = Field(default_factory=list)
  category: str = Field(..., min_length=1, description="Product category")
  brand: Optional[str] = None
  stock: int = Field(0, ge=0, description="Units in stock")


class ProductUpdate(CamelModel):
  model_config = ConfigDict(str_strip_whitespace=True)

  name: Optional[str] = Field(None, min_length=1)
  description: Optional[str] = Field(None, min_length=1)
  price: Optional[float] = Field(None, ge=0)
  images: Optional[List[str]] = None
  tags: Optional[List[str]] = None
  category: Optional[str] = Field(None, min_length=1)
  brand: Optional[str] = None
  stock: Optional[int] = Field(None, ge=0)


class ProductRead(CamelModel):
  id: int
  name: str
  slug: str
  description: str
  price: float
  images: List[str] = Field(default_factory=list)
  tags: List[str] = Field(default_factory=list)
  category: str
  brand: Optional[str] = None
  stock: int = 0
  is_active: bool = True
  created_at: datetime
  updated_at: datetime


class RowError(CamelModel):
  row: int
  error: str


class ImportOutcome(CamelModel):
  inserted_count: int = 0
  error_count: int = 0
  errors: List[RowError] = Field(default_factory=list)


class BulkUploadResponse(ImportOutcome):
  message: str
