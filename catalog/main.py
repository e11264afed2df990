# catalog/main.py

from fastapi import FastAPI, File, HTTPException, Request, UploadFile
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from typing import List, Optional
from catalog import product_service
from catalog.models import BulkUploadResponse, ProductCreate, ProductRead, ProductUpdate
from catalog.database import init_db
from catalog.bulk_import import run_bulk_import
from catalog.uploads import ensure_csv, save_upload
import catalog.exceptions as ex

from catalog.logger import configure_logging, get_logger
configure_logging()

log = get_logger(__name__)
log.info("FastAPI application is starting...")

@asynccontextmanager
async def lifespan(app: FastAPI):
  init_db()
  yield


app = FastAPI(title="Product Catalog",
              lifespan=lifespan,
              description="Product catalog API with CRUD endpoints and bulk CSV import.",
              version="1.0.0")


def _not_found(e: ex.ProductNotFoundError):
  log.error(f"[API] {e}")
  return HTTPException(status_code=404, detail="Product not found")


def _storage_failed(e: ex.StorageError):
  log.error(f"[API] StorageError: {e}")
  return HTTPException(status_code=500, detail="Server Error")


@app.get("/api/products", response_model=List[ProductRead])
def list_products():
  """All products, newest first."""
  log.info("/api/products list endpoint called")
  try:
    return product_service.list_products()
  except ex.StorageError as e:
    raise _storage_failed(e)


@app.get("/api/products/slug/{slug}", response_model=ProductRead)
def get_product_by_slug(slug: str):
  try:
    return product_service.get_product_by_slug(slug)
  except ex.ProductNotFoundError as e:
    raise _not_found(e)
  except ex.StorageError as e:
    raise _storage_failed(e)


@app.get("/api/products/{product_id}", response_model=ProductRead)
def get_product(product_id: int):
  try:
    return product_service.get_product(product_id)
  except ex.ProductNotFoundError as e:
    raise _not_found(e)
  except ex.StorageError as e:
    raise _storage_failed(e)


@app.post("/api/products", response_model=ProductRead, status_code=201)
def create_product(product: ProductCreate):
  log.info(f"Creating product '{product.name}'")
  try:
    return product_service.create_product(product)
  except ex.StorageError as e:
    raise _storage_failed(e)


@app.post("/api/products/bulk-upload", response_model=BulkUploadResponse)
def bulk_upload(file: Optional[UploadFile] = File(None, description="CSV file with a header row")):
  """
  Import products from an uploaded CSV file.
  Invalid rows are reported in 'errors' and do not stop the import. Valid rows are stored with one bulk insert.
  """
  if file is None:
    raise HTTPException(status_code=400, detail="No file uploaded")
  log.info(f"/api/products/bulk-upload called with file='{file.filename}' content_type='{file.content_type}'")
  try:
    ensure_csv(file.content_type)
  except ex.UnsupportedMediaError as e:
    raise HTTPException(status_code=400, detail=str(e))

  path = save_upload(file.file)
  try:
    outcome = run_bulk_import(path)
  except ex.CSVParseError as e:
    log.error(f"[API] CSVParseError for '{file.filename}': {e}")
    raise HTTPException(status_code=400, detail={"message": "Failed to parse CSV", "error": str(e)})
  except ex.StorageError as e:
    log.error(f"[API] Bulk insert failed for '{file.filename}': {e}")
    raise HTTPException(status_code=500, detail={"message": "Bulk insert failed", "error": str(e)})

  return BulkUploadResponse(message="Bulk upload completed", **outcome.model_dump())


@app.put("/api/products/{product_id}", response_model=ProductRead)
def update_product(product_id: int, changes: ProductUpdate):
  try:
    return product_service.update_product(product_id, changes)
  except ex.ProductNotFoundError as e:
    raise _not_found(e)
  except ex.StorageError as e:
    raise _storage_failed(e)


@app.put("/api/products/{product_id}/deactivate", response_model=ProductRead)
def deactivate_product(product_id: int):
  try:
    return product_service.deactivate_product(product_id)
  except ex.ProductNotFoundError as e:
    raise _not_found(e)
  except ex.StorageError as e:
    raise _storage_failed(e)


@app.delete("/api/products/{product_id}")
def delete_product(product_id: int):
  try:
    product_service.delete_product(product_id)
  except ex.ProductNotFoundError as e:
    raise _not_found(e)
  except ex.StorageError as e:
    raise _storage_failed(e)
  return {"message": "Product deleted"}


@app.get("/")
def root():
  return {"messages": "Product Catalog API - endpoints: /api/products, /api/products/bulk-upload"}


@app.get("/health")
def healthcheck():
  return {"status": "ok"}


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
  log.error(f"Unhandled exception: {exc}", exc_info=True)
  return JSONResponse(
    status_code=500,
    content={"detail": "Internal Server Error"},
  )
