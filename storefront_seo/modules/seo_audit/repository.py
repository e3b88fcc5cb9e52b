"""Content repositories that supply published items to the SEO audit."""

import logging
from typing import Iterable, Optional, Protocol

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from storefront_seo.models import Page, Product, SEOMetadata
from storefront_seo.models.catalog import STATUS_PUBLISHED
from storefront_seo.models.seo import ENTITY_PAGE, ENTITY_PRODUCT
from storefront_seo.modules.seo_audit.adapters import page_to_item, product_to_item
from storefront_seo.modules.seo_audit.engine import AuditableItem

logger = logging.getLogger(__name__)


class ContentRepository(Protocol):
    """Anything that can list the published items to audit."""

    def list_published_auditable_items(self) -> list[AuditableItem]:
        ...


class InMemoryContentRepository:
    """Repository over a fixed list of items (tests, imports, previews)."""

    def __init__(self, items: Optional[Iterable[AuditableItem]] = None) -> None:
        self._items = list(items or [])

    def list_published_auditable_items(self) -> list[AuditableItem]:
        return list(self._items)


class SQLAlchemyContentRepository:
    """Reads published products and pages plus their SEO overrides.

    Products come first, then pages; each group keeps creation order.
    A table that cannot be read is logged and contributes nothing; the
    other tables are still returned.

    Usage::

        repo = SQLAlchemyContentRepository(get_session_factory())
        items = repo.list_published_auditable_items()
    """

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    def list_published_auditable_items(self) -> list[AuditableItem]:
        try:
            with self._session_factory() as session:
                return self._load(session)
        except SQLAlchemyError as exc:
            logger.error("Failed to load published content for SEO audit: %s", exc)
            return []

    def _fetch(self, session: Session, label: str, stmt) -> list:
        """Run *stmt*; a failing table is logged and treated as empty."""
        try:
            return list(session.scalars(stmt).all())
        except SQLAlchemyError as exc:
            session.rollback()
            logger.error("Failed to load %s for SEO audit: %s", label, exc)
            return []

    def _load(self, session: Session) -> list[AuditableItem]:
        products = self._fetch(
            session, "published products",
            select(Product)
            .where(Product.status == STATUS_PUBLISHED)
            .order_by(Product.created_at, Product.id),
        )
        pages = self._fetch(
            session, "published pages",
            select(Page)
            .where(Page.status == STATUS_PUBLISHED)
            .order_by(Page.created_at, Page.id),
        )
        seo_rows = self._fetch(
            session, "SEO metadata",
            select(SEOMetadata).where(
                SEOMetadata.entity_type.in_((ENTITY_PRODUCT, ENTITY_PAGE))
            ),
        )
        seo_by_entity = {(row.entity_type, row.entity_id): row for row in seo_rows}

        items = [
            product_to_item(p, seo_by_entity.get((ENTITY_PRODUCT, p.id)))
            for p in products
        ]
        items.extend(
            page_to_item(p, seo_by_entity.get((ENTITY_PAGE, p.id)))
            for p in pages
        )
        logger.debug(
            "Loaded %d published products and %d published pages",
            len(products), len(pages),
        )
        return items
