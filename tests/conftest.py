# tests/conftest.py

import os
os.environ.setdefault("APP_ENV", "testing")

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import create_engine

import catalog.database as database
from catalog import config


@pytest.fixture(autouse=True)
def set_test_env(monkeypatch):
  monkeypatch.setenv("APP_ENV", "testing")


@pytest.fixture(autouse=True)
def memory_db(monkeypatch):
  """Fresh in-memory database for every test"""
  engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool
  )
  monkeypatch.setattr(database, "engine", engine)
  database.init_db()
  yield engine
  engine.dispose()


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
  """Spool uploads to a per-test directory so leftovers can be checked"""
  monkeypatch.setattr(config, "UPLOAD_DIR", str(tmp_path))
  return tmp_path
