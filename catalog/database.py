# catalog/database.py

from sqlmodel import SQLModel, create_engine, Session
import os
from catalog import config
from catalog.logger import get_logger

log = get_logger(__name__)


def _make_engine(url: str):
  connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
  return create_engine(url, echo=False, connect_args=connect_args)


engine = _make_engine(config.DB_URL)


def init_db():
  """Creates the product table on the configured database"""
  from catalog.db_models import Product

  # Ensure the db directory exists for file based sqlite
  if engine.url.get_backend_name() == "sqlite" and engine.url.database not in (None, "", ":memory:"):
    db_dir = os.path.dirname(engine.url.database)
    if db_dir:
      os.makedirs(db_dir, exist_ok=True)

  SQLModel.metadata.create_all(engine, tables=[Product.__table__], checkfirst=True)
  log.info(f"Initialized catalog database ({engine.url.render_as_string(hide_password=True)})")


def get_session() -> Session:
  """Create new session on the catalog database"""
  return Session(engine)

