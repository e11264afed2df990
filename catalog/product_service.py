# catalog/product_service.py

from typing import List, Optional, Sequence
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select
from catalog.db_models import Product, utc_now
from catalog.database import get_session
from catalog.models import ProductCreate, ProductRead, ProductRecord, ProductUpdate
from catalog.slugs import unique_slug
import catalog.exceptions as ex
from catalog.logger import get_logger

log = get_logger(__name__)


def _slug_taken(session: Session, slug: str, exclude_id: Optional[int] = None) -> bool:
  statement = select(Product.id).where(Product.slug == slug)
  if exclude_id is not None:
    statement = statement.where(Product.id != exclude_id)
  return session.exec(statement).first() is not None


def _get_or_raise(session: Session, product_id: int) -> Product:
  product = session.get(Product, product_id)
  if product is None:
    raise ex.ProductNotFoundError(product_id)
  return product


def insert_many(records: Sequence[ProductRecord]) -> List[ProductRead]:
  """
  Store every record in a single transaction.

  Args:
    records (Sequence[ProductRecord]): Validated records from the bulk import

  Returns:
    List[ProductRead]: Persisted products, in input order. Empty input returns [] without opening a session.
  """
  if not records:
    log.info("insert_many called with no records, nothing to store")
    return []

  session = get_session()
  try:
    used_slugs = set()
    products = list()
    for record in records:
      slug = unique_slug(record.name, lambda s: s in used_slugs or _slug_taken(session, s))
      used_slugs.add(slug)
      product = Product(
        name=record.name,
        slug=slug,
        description=record.description,
        price=record.price,
        images=list(record.images),
        tags=list(record.tags),
        category=record.category,
        stock=record.stock,
        created_at=record.created_at,
        updated_at=record.created_at
      )
      session.add(product)
      products.append(product)

    session.commit()
    for product in products:
      session.refresh(product)
    log.info(f"Inserted {len(products)} products in one transaction")
    return [ProductRead.model_validate(p) for p in products]

  except SQLAlchemyError as e:
    log.error(f"Bulk insert of {len(records)} products failed: {e}")
    session.rollback()
    raise ex.StorageError(f"Bulk insert failed: {e}") from e
  finally:
    session.close()


def list_products() -> List[ProductRead]:
  """All products, newest first"""
  session = get_session()
  try:
    statement = select(Product).order_by(Product.created_at.desc(), Product.id.desc())
    records = session.exec(statement).all()
    log.info(f"Found {len(records)} products")
    return [ProductRead.model_validate(r) for r in records]
  except SQLAlchemyError as e:
    log.error(f"Error listing products: {e}")
    raise ex.StorageError(f"Could not list products: {e}") from e
  finally:
    session.close()


def get_product(product_id: int) -> ProductRead:
  session = get_session()
  try:
    return ProductRead.model_validate(_get_or_raise(session, product_id))
  except SQLAlchemyError as e:
    log.error(f"Error fetching product {product_id}: {e}")
    raise ex.StorageError(f"Could not fetch product: {e}") from e
  finally:
    session.close()


def get_product_by_slug(slug: str) -> ProductRead:
  session = get_session()
  try:
    product = session.exec(select(Product).where(Product.slug == slug)).first()
    if product is None:
      raise ex.ProductNotFoundError(slug, field="slug")
    return ProductRead.model_validate(product)
  except SQLAlchemyError as e:
    log.error(f"Error fetching product by slug '{slug}': {e}")
    raise ex.StorageError(f"Could not fetch product: {e}") from e
  finally:
    session.close()


def create_product(data: ProductCreate) -> ProductRead:
  """Store one product, deriving its slug from the name"""
  session = get_session()
  try:
    now = utc_now()
    product = Product(
      **data.model_dump(),
      slug=unique_slug(data.name, lambda s: _slug_taken(session, s)),
      created_at=now,
      updated_at=now
    )
    session.add(product)
    session.commit()
    session.refresh(product)
    log.info(f"Created product {product.id} ('{product.slug}')")
    return ProductRead.model_validate(product)
  except SQLAlchemyError as e:
    log.error(f"Error creating product '{data.name}': {e}")
    session.rollback()
    raise ex.StorageError(f"Could not create product: {e}") from e
  finally:
    session.close()


def update_product(product_id: int, changes: ProductUpdate) -> ProductRead:
  """
  Apply the fields set on changes and refresh updated_at.
  A changed name re-derives the slug.
  """
  session = get_session()
  try:
    product = _get_or_raise(session, product_id)
    values = changes.model_dump(exclude_unset=True)
    # Explicit nulls on required columns are ignored
    values = {k: v for k, v in values.items() if v is not None or k == "brand"}

    name_changed = "name" in values and values["name"] != product.name
    for key, value in values.items():
      setattr(product, key, value)
    if name_changed:
      product.slug = unique_slug(product.name, lambda s: _slug_taken(session, s, exclude_id=product_id))
    product.updated_at = utc_now()

    session.add(product)
    session.commit()
    session.refresh(product)
    log.info(f"Updated product {product_id} fields={sorted(values)}")
    return ProductRead.model_validate(product)
  except SQLAlchemyError as e:
    log.error(f"Error updating product {product_id}: {e}")
    session.rollback()
    raise ex.StorageError(f"Could not update product: {e}") from e
  finally:
    session.close()


def deactivate_product(product_id: int) -> ProductRead:
  session = get_session()
  try:
    product = _get_or_raise(session, product_id)
    product.is_active = False
    product.updated_at = utc_now()
    session.add(product)
    session.commit()
    session.refresh(product)
    log.info(f"Deactivated product {product_id}")
    return ProductRead.model_validate(product)
  except SQLAlchemyError as e:
    log.error(f"Error deactivating product {product_id}: {e}")
    session.rollback()
    raise ex.StorageError(f"Could not deactivate product: {e}") from e
  finally:
    session.close()


def delete_product(product_id: int) -> None:
  session = get_session()
  try:
    product = _get_or_raise(session, product_id)
    session.delete(product)
    session.commit()
    log.info(f"Deleted product {product_id}")
  except SQLAlchemyError as e:
    log.error(f"Error deleting product {product_id}: {e}")
    session.rollback()
    raise ex.StorageError(f"Could not delete product: {e}") from e
  finally:
    session.close()
