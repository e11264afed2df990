# catalog/logger.py

import logging
from logging.handlers import RotatingFileHandler
import os
import sys
import json
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone

from catalog import config

SERVICE_NAME = "catalog"

# Id of the bulk import running in the current request, None outside an import
current_import_id: ContextVar = ContextVar("current_import_id", default=None)


class ImportContextFilter(logging.Filter):
  """Stamps every record with the id of the bulk import it was logged under"""
  def filter(self, record):
    record.import_id = current_import_id.get()
    return True


@contextmanager
def import_context(import_id: str = None):
  """
  Tag every log record written inside the block with an import id.

  Yields:
    str: The id in use, generated when not given
  """
  import_id = import_id or uuid.uuid4().hex[:12]
  token = current_import_id.set(import_id)
  try:
    yield import_id
  finally:
    current_import_id.reset(token)


class JsonFormatter(logging.Formatter):
  """One JSON object per line, with service, environment and import id"""
  def format(self, record):
    log_record = {
      "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
      "service": SERVICE_NAME,
      "env": os.getenv("APP_ENV", config.APP_ENV),
      "level": record.levelname,
      "logger": record.name,
      "message": record.getMessage(),
      "location": f"{record.module}:{record.funcName}:{record.lineno}"
    }

    import_id = getattr(record, "import_id", None)
    if import_id:
      log_record["import_id"] = import_id

    if record.exc_info:
      log_record["exception"] = self.formatException(record.exc_info)

    return json.dumps(log_record)


json_formatter = JsonFormatter()

def _handler(handler: logging.Handler, level: int) -> logging.Handler:
  handler.setFormatter(json_formatter)
  handler.setLevel(level)
  handler.addFilter(ImportContextFilter())
  return handler


def configure_logging():
  """
  Install the catalog handlers on the root logger.

  development/testing log DEBUG and up, production INFO and up. ERROR goes to
  stdout, everything else to logs/app.log (logs/test.log under APP_ENV=testing).
  """
  # Read at call time so tests can switch to "testing" with monkeypatch
  env = os.getenv("APP_ENV", config.APP_ENV)
  os.makedirs(config.LOG_DIR, exist_ok=True)

  logger = logging.getLogger()
  logger.setLevel(logging.INFO if env == "production" else logging.DEBUG)

  # Clear previous handler
  if logger.hasHandlers():
    logger.handlers.clear()

  logger.addHandler(_handler(logging.StreamHandler(sys.stdout), logging.ERROR))

  if env == "testing":
    test_log_file = os.path.join(config.LOG_DIR, "test.log")
    file_handler = RotatingFileHandler(test_log_file, maxBytes=1*1024*1024, backupCount=1, encoding="utf-8")
    logger.addHandler(_handler(file_handler, logging.DEBUG))
  else:
    app_log_file = os.path.join(config.LOG_DIR, "app.log")
    file_handler = RotatingFileHandler(app_log_file, maxBytes=5*1024*1024, backupCount=3, encoding="utf-8")
    logger.addHandler(_handler(file_handler, logging.INFO))


def get_logger(name):
  """
  Returns a logger object with specific name.
  Before call this function configure_logging() must be called.
  """
  return logging.getLogger(name)
