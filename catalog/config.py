# catalog/config.py

"""
Catalog service settings.

Every tunable is read from the environment here, other modules import
from config instead of calling os.getenv themselves.
"""

import os
import tempfile

# Environment: development, testing, production
APP_ENV = os.getenv("APP_ENV", "development")

# Database
DB_FILE = os.getenv("CATALOG_DB_FILE", "db/catalog.db")
DB_URL = os.getenv("CATALOG_DB_URL", f"sqlite:///{DB_FILE}")

# Logging
LOG_DIR = os.getenv("CATALOG_LOG_DIR", "logs")

# Uploads are spooled here before the bulk import streams them
UPLOAD_DIR = os.getenv("CATALOG_UPLOAD_DIR", tempfile.gettempdir())
CSV_MEDIA_TYPES = ("text/csv", "application/csv", "application/vnd.ms-excel")

# Server
HOST = os.getenv("CATALOG_HOST", "0.0.0.0")
PORT = int(os.getenv("CATALOG_PORT", "8000"))
