# catalog/exceptions.py

class CatalogException(Exception):
  """All catalog errors"""
  pass

class ProductNotFoundError(CatalogException):
  """Lookup by id or slug matched nothing"""
  def __init__(self, key, field: str = "id"):
    self.key = key
    self.field = field
    super().__init__(f"No product with {field} '{key}'")

class StorageError(CatalogException):
  """Database could not complete the operation"""
  pass

class CSVParseError(CatalogException):
  """Uploaded file is not well-formed CSV"""
  pass

class UnsupportedMediaError(CatalogException):
  """Upload declared a media type other than CSV"""
  def __init__(self, content_type: str = None):
    self.content_type = content_type
    super().__init__(f"Only CSV files are allowed (got '{content_type}')")
