# catalog/db_models.py

from sqlmodel import SQLModel, Field, Column, JSON
from typing import List, Optional
from datetime import datetime, timezone


def utc_now() -> datetime:
  return datetime.now(timezone.utc)


class Product(SQLModel, table=True):
  """Persisted catalog product"""
  __tablename__ = "product"
  __table_args__ = {"extend_existing": True}

  id: Optional[int] = Field(default=None, primary_key=True)
  name: str
  slug: str = Field(unique=True, index=True)
  description: str
  price: float
  images: List[str] = Field(default_factory=list, sa_column=Column(JSON))
  tags: List[str] = Field(default_factory=list, sa_column=Column(JSON))
  category: str
  brand: Optional[str] = None
  stock: int = 0
  is_active: bool = True
  created_at: datetime = Field(default_factory=utc_now, index=True) # Index for newest-first listing
  updated_at: datetime = Field(default_factory=utc_now)
