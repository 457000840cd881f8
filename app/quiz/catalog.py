"""
Refonte Quiz - Catalog Loading

Loads the question catalog once and validates it eagerly, so malformed
catalog data fails at startup instead of during a visitor's quiz run.

Rules:
- at least one category
- category slugs unique
- question ids unique across the whole catalog
- every question offers at least one option, scores are integers
- a category may hold zero questions
"""

import os
import json
import logging
from pathlib import Path
from typing import Any, List, Optional, Union

from pydantic import ValidationError

from .models import Category, QuizCatalog

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).parent / "data" / "catalog.json"


class CatalogError(Exception):
    """Raised when catalog data is missing or malformed."""

    def __init__(self, message: str, path: Optional[str] = None):
        self.message = message
        self.path = path
        super().__init__(f"{message} ({path})" if path else message)


def parse_catalog(data: Any, source: Optional[str] = None) -> QuizCatalog:
    """
    Build a validated QuizCatalog from decoded JSON.

    Args:
        data: List of category dicts in the question-file shape
        source: Where the data came from, for error messages

    Raises:
        CatalogError on any structural problem
    """
    if not isinstance(data, list) or not data:
        raise CatalogError("Catalog must be a non-empty list of categories", source)

    categories: List[Category] = []
    for index, raw in enumerate(data):
        try:
            categories.append(Category.model_validate(raw))
        except ValidationError as e:
            raise CatalogError(f"Invalid category at position {index}: {e}", source) from e

    seen_slugs = set()
    seen_ids = set()
    for category in categories:
        if category.slug in seen_slugs:
            raise CatalogError(f"Duplicate category slug: {category.slug}", source)
        seen_slugs.add(category.slug)

        for question in category.questions:
            if question.id in seen_ids:
                raise CatalogError(f"Duplicate question id: {question.id}", source)
            seen_ids.add(question.id)

    return QuizCatalog(categories=categories)


def load_catalog(path: Optional[Union[str, Path]] = None) -> QuizCatalog:
    """Read and validate a catalog file (defaults to the packaged one)."""
    catalog_path = Path(path) if path else DEFAULT_CATALOG_PATH

    try:
        with open(catalog_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise CatalogError("Catalog file not found", str(catalog_path)) from e
    except json.JSONDecodeError as e:
        raise CatalogError(f"Catalog is not valid JSON: {e}", str(catalog_path)) from e

    catalog = parse_catalog(data, str(catalog_path))
    logger.info(
        f"Loaded quiz catalog: {len(catalog.categories)} categories, "
        f"{sum(len(c.questions) for c in catalog.categories)} questions"
    )
    return catalog


_catalog_cache: Optional[QuizCatalog] = None


def get_catalog() -> QuizCatalog:
    """Cached catalog. QUIZ_CATALOG_PATH overrides the packaged file."""
    global _catalog_cache

    if _catalog_cache is not None:
        return _catalog_cache

    _catalog_cache = load_catalog(os.getenv("QUIZ_CATALOG_PATH") or None)
    return _catalog_cache


def clear_catalog_cache() -> None:
    global _catalog_cache
    _catalog_cache = None
