# catalog/slugs.py

from typing import Callable
from slugify import slugify

FALLBACK_SLUG = "product"


def make_slug(name: str) -> str:
  """Lower-case, hyphen separated slug of a product name ('Blue Mug!' -> 'blue-mug')"""
  return slugify(name or "", lowercase=True) or FALLBACK_SLUG


def unique_slug(name: str, is_taken: Callable[[str], bool]) -> str:
  """
  Slug for name that is_taken() reports free, appending -2, -3, ... on collision.

  Args:
    name (str): Product name
    is_taken (Callable[[str], bool]): Returns True when the candidate already belongs to another product

  Returns:
    str: First free candidate
  """
  base = make_slug(name)
  candidate = base
  suffix = 2
  while is_taken(candidate):
    candidate = f"{base}-{suffix}"
    suffix += 1
  return candidate
