# tests/test_product_service.py

import pytest
from sqlalchemy.exc import OperationalError
from sqlmodel import Session

from catalog import product_service
from catalog.exceptions import StorageError
from catalog.models import ProductCreate, ProductRecord


def record(name: str, price: float = 1.0) -> ProductRecord:
  return ProductRecord(name=name, description=f"{name} description", price=price, category="Tools")


def test_insert_many_stores_batch_in_order():
  inserted = product_service.insert_many([record("Hammer"), record("Saw")])
  assert [p.slug for p in inserted] == ["hammer", "saw"]
  assert len(product_service.list_products()) == 2


def test_insert_many_with_nothing_is_a_noop():
  assert product_service.insert_many([]) == []
  assert product_service.list_products() == []


def test_insert_many_commit_failure_rolls_back(monkeypatch):
  def failing_commit(self):
    raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

  with monkeypatch.context() as m:
    m.setattr(Session, "commit", failing_commit)
    with pytest.raises(StorageError):
      product_service.insert_many([record("Hammer"), record("Saw")])

  assert product_service.list_products() == []


def test_insert_many_slug_clash_leaves_nothing_behind(monkeypatch):
  existing = product_service.create_product(
    ProductCreate(name="Widget", description="Original", price=2, category="Tools")
  )
  # Skip the collision lookup so the unique index rejects the batch at flush
  monkeypatch.setattr(product_service, "_slug_taken", lambda session, slug, exclude_id=None: False)

  with pytest.raises(StorageError):
    product_service.insert_many([record("Gadget"), record("Widget")])

  products = product_service.list_products()
  assert [p.id for p in products] == [existing.id]
  assert products[0].description == "Original"
