"""SQLAlchemy ORM models: import every model so Base.metadata is populated."""

from storefront_seo.models.catalog import (
    Page,
    Product,
)
from storefront_seo.models.seo import SEOMetadata

__all__ = [
    "Product",
    "Page",
    "SEOMetadata",
]
