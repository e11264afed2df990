# catalog/bulk_import.py

"""
Bulk product import from CSV.

The uploaded file is read as a lazy stream of rows. Each row is checked
against an ordered list of rules, the first failing rule names the error
for that row. Valid rows are collected and written with one bulk insert
once the stream ends. A malformed file (e.g. an unterminated quote) aborts
the whole import before anything is written.
"""

import csv
import io
import math
import re
import sys
from datetime import datetime, timezone
from typing import BinaryIO, Callable, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from catalog import product_service
from catalog.models import ImportOutcome, ProductRecord, RowError
from catalog.uploads import remove_upload
import catalog.exceptions as ex
from catalog.logger import get_logger, import_context

log = get_logger(__name__)

Row = Dict[str, str]
Inserter = Callable[[Sequence[ProductRecord]], Sequence]

REQUIRED_FIELDS = ("name", "description", "price", "category")
CURLY_QUOTES = str.maketrans({"“": '"', "”": '"'})
INTEGER_PATTERN = re.compile(r"[+-]?\d+")

# Rows and fields have no size cap
try:
  csv.field_size_limit(sys.maxsize)
except OverflowError:
  csv.field_size_limit(2**31 - 1)

MISSING_FIELDS = "Missing required fields"
INVALID_PRICE = "Invalid price"
INVALID_STOCK = "Invalid stock"


def iter_csv_rows(stream: BinaryIO) -> Iterator[Row]:
  """
  Yield the rows of a CSV byte stream as dicts keyed by the header.

  Header names and values are trimmed, rows whose values are all blank are
  skipped. Raises CSVParseError on malformed CSV or undecodable bytes.
  """
  text = io.TextIOWrapper(stream, encoding="utf-8-sig", newline="")
  reader = csv.DictReader(text, strict=True)
  try:
    if not reader.fieldnames:
      raise ex.CSVParseError("CSV file has no header row")
    reader.fieldnames = [name.strip() for name in reader.fieldnames]

    for row in reader:
      values = {key: (value or "").strip() for key, value in row.items() if key is not None}
      if not any(values.values()):
        continue
      yield values
  except csv.Error as e:
    raise ex.CSVParseError(f"Malformed CSV near line {reader.line_num}: {e}") from e
  except UnicodeDecodeError as e:
    raise ex.CSVParseError(f"File is not valid UTF-8 text: {e}") from e
  finally:
    # Leave the underlying stream open, its owner closes it
    text.detach()


def parse_price(value: Optional[str]) -> Optional[float]:
  try:
    price = float(value)
  except (TypeError, ValueError):
    return None
  if not math.isfinite(price) or price < 0:
    return None
  return price


def parse_stock(value: Optional[str]) -> Optional[int]:
  """Blank or missing stock is 0"""
  if not value:
    return 0
  if not INTEGER_PATTERN.fullmatch(value):
    return None
  stock = int(value)
  return stock if stock >= 0 else None


def split_list(value: Optional[str]) -> List[str]:
  if not value:
    return []
  return [item.strip() for item in value.split(",") if item.strip()]


def split_tags(value: Optional[str]) -> List[str]:
  if not value:
    return []
  return split_list(value.translate(CURLY_QUOTES))


def _has_required_fields(row: Row) -> bool:
  return all(row.get(field) for field in REQUIRED_FIELDS)

def _has_valid_price(row: Row) -> bool:
  return parse_price(row.get("price")) is not None

def _has_valid_stock(row: Row) -> bool:
  return parse_stock(row.get("stock")) is not None


# Evaluated in order, the first failing rule is the reported error
VALIDATION_RULES: Tuple[Tuple[Callable[[Row], bool], str], ...] = (
  (_has_required_fields, MISSING_FIELDS),
  (_has_valid_price, INVALID_PRICE),
  (_has_valid_stock, INVALID_STOCK),
)


def validate_row(row: Row) -> Optional[str]:
  """Return the reason the row is rejected, None when it is valid"""
  for rule, reason in VALIDATION_RULES:
    if not rule(row):
      return reason
  return None


def build_record(row: Row, imported_at: datetime) -> ProductRecord:
  """Build a ProductRecord from a row that passed validate_row()"""
  return ProductRecord(
    name=row["name"],
    description=row["description"],
    price=parse_price(row["price"]),
    images=split_list(row.get("images")),
    tags=split_tags(row.get("tags")),
    category=row["category"],
    stock=parse_stock(row.get("stock")),
    created_at=imported_at
  )


def process_rows(rows: Iterable[Row], imported_at: Optional[datetime] = None) -> Tuple[List[ProductRecord], List[RowError]]:
  """
  Classify every row as accepted or rejected, in stream order.

  Args:
    rows (Iterable[Row]): Parsed rows, consumed once
    imported_at (Optional[datetime]): createdAt for accepted records, defaults to now

  Returns:
    Tuple[List[ProductRecord], List[RowError]]: Accepted records and per-row errors
  """
  imported_at = imported_at or datetime.now(timezone.utc)
  accepted = list()
  errors = list()

  for row_number, row in enumerate(rows, start=1):
    reason = validate_row(row)
    if reason is None:
      accepted.append(build_record(row, imported_at))
    else:
      log.debug(f"Row {row_number} rejected: {reason}")
      errors.append(RowError(row=row_number, error=reason))

  return accepted, errors


def import_products(stream: BinaryIO, inserter: Optional[Inserter] = None) -> ImportOutcome:
  """
  Validate every row of a CSV stream and store the valid ones with one bulk insert.

  Args:
    stream (BinaryIO): CSV bytes with a header row
    inserter (Optional[Inserter]): Bulk insert function, defaults to product_service.insert_many

  Returns:
    ImportOutcome: Inserted count, error count and the per-row errors

  Raises:
    CSVParseError: The stream is not well-formed CSV, nothing was inserted
    StorageError: The bulk insert failed
  """
  inserter = inserter or product_service.insert_many

  with import_context() as import_id:
    log.info(f"Starting bulk product import {import_id}")

    accepted, errors = process_rows(iter_csv_rows(stream))
    log.info(f"Parsed {len(accepted) + len(errors)} rows: {len(accepted)} valid, {len(errors)} rejected")

    inserted = inserter(accepted)

    outcome = ImportOutcome(inserted_count=len(inserted), error_count=len(errors), errors=errors)
    log.info(f"Bulk import completed. Inserted {outcome.inserted_count}, errors {outcome.error_count}")
  return outcome


def run_bulk_import(path: str, inserter: Optional[Inserter] = None) -> ImportOutcome:
  """Import the CSV file at path, then remove it whatever the outcome"""
  try:
    with open(path, "rb") as fh:
      return import_products(fh, inserter)
  finally:
    remove_upload(path)
