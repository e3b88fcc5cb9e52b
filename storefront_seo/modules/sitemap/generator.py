"""Sitemap Generator: XML sitemap and robots.txt for the storefront.

Lists the static shop routes plus every published product and page.
Products live under ``/product/<slug>``; pages are served from the site
root, except the ``home`` page which is the root itself.
"""

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable, Optional
from xml.dom import minidom

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from storefront_seo.models import Page, Product
from storefront_seo.models.catalog import STATUS_PUBLISHED

logger = logging.getLogger(__name__)

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"
DEFAULT_BASE_URL = "http://localhost:3000"
HOME_PAGE_SLUG = "home"

KIND_STATIC = "static"
KIND_PRODUCT = "product"
KIND_PAGE = "page"

# (path, changefreq, priority)
STATIC_ROUTES = [
    ("", "daily", 1.0),
    ("/shop", "daily", 0.9),
    ("/cart", "weekly", 0.6),
    ("/resources", "weekly", 0.5),
]
PRODUCT_CHANGEFREQ, PRODUCT_PRIORITY = "weekly", 0.8
PAGE_CHANGEFREQ, PAGE_PRIORITY = "monthly", 0.6

# Paths crawlers should stay out of.
ROBOTS_DISALLOW = ["/dashboard", "/api"]


@dataclass(frozen=True)
class SitemapEntry:
    """One ``<url>`` element of the sitemap."""

    loc: str
    lastmod: datetime
    changefreq: str
    priority: float
    kind: str = KIND_STATIC


def _get(record: Any, name: str) -> Any:
    if isinstance(record, dict):
        return record.get(name)
    return getattr(record, name, None)


def _lastmod(record: Any, now: datetime) -> datetime:
    return _get(record, "updated_at") or _get(record, "created_at") or now


def build_sitemap_entries(
    products: Iterable[Any],
    pages: Iterable[Any],
    base_url: str = DEFAULT_BASE_URL,
    now: Optional[datetime] = None,
) -> list[SitemapEntry]:
    """Build entries for static routes, then products, then pages.

    *products* and *pages* are published rows (ORM objects or mappings)
    carrying ``slug``, ``updated_at`` and ``created_at``.  Rows without a
    slug are skipped.
    """
    now = now or datetime.now(timezone.utc)
    base = base_url.rstrip("/")

    entries = [
        SitemapEntry(base + path if path else base + "/", now, freq, priority, KIND_STATIC)
        for path, freq, priority in STATIC_ROUTES
    ]
    for product in products:
        slug = _get(product, "slug")
        if not slug:
            continue
        entries.append(SitemapEntry(
            f"{base}/product/{slug}", _lastmod(product, now),
            PRODUCT_CHANGEFREQ, PRODUCT_PRIORITY, KIND_PRODUCT,
        ))
    for page in pages:
        slug = _get(page, "slug")
        if not slug or slug == HOME_PAGE_SLUG:
            continue
        entries.append(SitemapEntry(
            f"{base}/{slug}", _lastmod(page, now),
            PAGE_CHANGEFREQ, PAGE_PRIORITY, KIND_PAGE,
        ))
    return entries


def _isoformat(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def render_sitemap_xml(entries: Iterable[SitemapEntry]) -> str:
    """Serialise *entries* as a sitemaps.org ``<urlset>`` document."""
    urlset = ET.Element("urlset")
    urlset.set("xmlns", SITEMAP_NS)
    for entry in entries:
        url = ET.SubElement(urlset, "url")
        ET.SubElement(url, "loc").text = entry.loc
        ET.SubElement(url, "lastmod").text = _isoformat(entry.lastmod)
        ET.SubElement(url, "changefreq").text = entry.changefreq
        ET.SubElement(url, "priority").text = f"{entry.priority:.1f}"

    rough = ET.tostring(urlset, encoding="unicode")
    return minidom.parseString(rough).toprettyxml(indent="  ", encoding="UTF-8").decode("utf-8")


def render_robots_txt(base_url: str = DEFAULT_BASE_URL) -> str:
    """robots.txt allowing everything but the admin area, pointing at the sitemap."""
    lines = ["# robots.txt", "User-agent: *", "Allow: /", ""]
    lines.append("# Disallow admin and dashboard")
    lines.extend("Disallow: " + path for path in ROBOTS_DISALLOW)
    lines.extend(["", "# Sitemap", "Sitemap: " + base_url.rstrip("/") + "/sitemap.xml", ""])
    return "\n".join(lines)


def sitemap_stats(entries: Iterable[SitemapEntry]) -> dict[str, int]:
    """URL counts for the sitemap screen: total plus one count per kind."""
    counts = {"total_urls": 0, KIND_STATIC: 0, "products": 0, "pages": 0}
    for entry in entries:
        counts["total_urls"] += 1
        if entry.kind == KIND_PRODUCT:
            counts["products"] += 1
        elif entry.kind == KIND_PAGE:
            counts["pages"] += 1
        else:
            counts[KIND_STATIC] += 1
    return counts


class SitemapBuilder:
    """Reads published products and pages and turns them into sitemap entries.

    Usage::

        builder = SitemapBuilder(get_session_factory(), "https://shop.example.com")
        xml = render_sitemap_xml(builder.build())
    """

    def __init__(self, session_factory: sessionmaker, base_url: str = DEFAULT_BASE_URL) -> None:
        self._session_factory = session_factory
        self.base_url = base_url.rstrip("/")

    def build(self, now: Optional[datetime] = None) -> list[SitemapEntry]:
        try:
            with self._session_factory() as session:
                products = self._fetch(session, Product)
                pages = self._fetch(session, Page)
                entries = build_sitemap_entries(products, pages, self.base_url, now)
        except SQLAlchemyError as exc:
            logger.error("Failed to open a session for the sitemap: %s", exc)
            entries = build_sitemap_entries([], [], self.base_url, now)
        logger.info("Sitemap built with %d URLs", len(entries))
        return entries

    @staticmethod
    def _fetch(session: Session, model) -> list:
        try:
            return list(session.scalars(
                select(model)
                .where(model.status == STATUS_PUBLISHED)
                .order_by(model.created_at, model.id)
            ).all())
        except SQLAlchemyError as exc:
            session.rollback()
            logger.error("Failed to load %s for the sitemap: %s", model.__tablename__, exc)
            return []
