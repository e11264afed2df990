# catalog/uploads.py

import os
import shutil
import tempfile
from typing import BinaryIO, Optional
from catalog import config
import catalog.exceptions as ex
from catalog.logger import get_logger

log = get_logger(__name__)


def ensure_csv(content_type: Optional[str]) -> None:
  """Raise UnsupportedMediaError unless the declared media type is CSV"""
  media_type = (content_type or "").split(";")[0].strip().lower()
  if media_type not in config.CSV_MEDIA_TYPES:
    log.warning(f"Rejected upload with media type '{content_type}'")
    raise ex.UnsupportedMediaError(content_type)


def save_upload(source: BinaryIO) -> str:
  """
  Copy an uploaded file to a temporary .csv file in chunks.

  Returns:
    str: Path of the temporary file, the caller owns it and must remove it

  A copy that fails partway leaves no file behind.
  """
  os.makedirs(config.UPLOAD_DIR, exist_ok=True)
  with tempfile.NamedTemporaryFile(dir=config.UPLOAD_DIR, suffix=".csv", delete=False) as temp_file:
    path = temp_file.name
    try:
      shutil.copyfileobj(source, temp_file)
    except Exception as e:
      log.error(f"Failed to spool upload to {path}: {e}")
      temp_file.close()
      remove_upload(path)
      raise
  log.debug(f"Spooled upload to {path}")
  return path


def remove_upload(path: str) -> None:
  if path and os.path.exists(path):
    os.unlink(path)
    log.debug(f"Removed temporary upload {path}")
