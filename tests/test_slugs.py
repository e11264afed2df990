# tests/test_slugs.py

from catalog.slugs import make_slug, unique_slug


def test_make_slug_is_lowercase_and_strict():
  assert make_slug("Blue Mug!") == "blue-mug"
  assert make_slug("  Extra   Large -- T-Shirt ") == "extra-large-t-shirt"


def test_make_slug_transliterates():
  assert make_slug("Café Crème") == "cafe-creme"


def test_make_slug_falls_back_when_nothing_is_left():
  assert make_slug("!!!") == "product"
  assert make_slug("") == "product"


def test_unique_slug_appends_counter():
  taken = {"blue-mug", "blue-mug-2"}
  assert unique_slug("Blue Mug", taken.__contains__) == "blue-mug-3"
  assert unique_slug("Red Mug", taken.__contains__) == "red-mug"
