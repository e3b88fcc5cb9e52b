"""Tests for sitemap entry building, XML/robots rendering and the DB builder."""

import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from storefront_seo.modules.sitemap import (
    SitemapBuilder,
    SitemapEntry,
    build_sitemap_entries,
    render_robots_txt,
    render_sitemap_xml,
    sitemap_stats,
)

NS = {"sm": "http://www.sitemaps.org/schemas/sitemap/0.9"}
NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)
BASE = "https://shop.example.com"


@pytest.fixture()
def rows():
    return {
        "products": [
            {"slug": "galaxy-s25", "updated_at": datetime(2025, 5, 2, tzinfo=timezone.utc),
             "created_at": datetime(2025, 1, 1, tzinfo=timezone.utc)},
            {"slug": "galaxy-buds", "updated_at": None,
             "created_at": datetime(2025, 2, 1, tzinfo=timezone.utc)},
            {"slug": "", "updated_at": None, "created_at": None},
        ],
        "pages": [
            {"slug": "home", "updated_at": None, "created_at": None},
            {"slug": "about-us", "updated_at": None, "created_at": None},
        ],
    }


# ===========================================================================
# 1. Entry building
# ===========================================================================
class TestBuildEntries:

    def test_static_routes_come_first(self, rows):
        entries = build_sitemap_entries(rows["products"], rows["pages"], BASE, NOW)
        static = [(e.loc, e.changefreq, e.priority) for e in entries[:4]]
        assert static == [
            (BASE + "/", "daily", 1.0),
            (BASE + "/shop", "daily", 0.9),
            (BASE + "/cart", "weekly", 0.6),
            (BASE + "/resources", "weekly", 0.5),
        ]

    def test_products_and_pages(self, rows):
        entries = build_sitemap_entries(rows["products"], rows["pages"], BASE, NOW)
        dynamic = [(e.loc, e.kind, e.changefreq, e.priority) for e in entries[4:]]
        assert dynamic == [
            (BASE + "/product/galaxy-s25", "product", "weekly", 0.8),
            (BASE + "/product/galaxy-buds", "product", "weekly", 0.8),
            (BASE + "/about-us", "page", "monthly", 0.6),
        ]

    def test_home_page_and_blank_slugs_skipped(self, rows):
        locs = [e.loc for e in build_sitemap_entries(rows["products"], rows["pages"], BASE, NOW)]
        assert BASE + "/home" not in locs
        assert BASE + "/product/" not in locs

    def test_lastmod_falls_back_to_created_then_now(self, rows):
        entries = {e.loc: e for e in build_sitemap_entries(rows["products"], rows["pages"], BASE, NOW)}
        assert entries[BASE + "/product/galaxy-s25"].lastmod == datetime(2025, 5, 2, tzinfo=timezone.utc)
        assert entries[BASE + "/product/galaxy-buds"].lastmod == datetime(2025, 2, 1, tzinfo=timezone.utc)
        assert entries[BASE + "/about-us"].lastmod == NOW

    def test_trailing_slash_on_base_url(self):
        entries = build_sitemap_entries([{"slug": "tab-s10"}], [], BASE + "/", NOW)
        assert entries[1].loc == BASE + "/shop"
        assert entries[-1].loc == BASE + "/product/tab-s10"

    def test_stats(self, rows):
        entries = build_sitemap_entries(rows["products"], rows["pages"], BASE, NOW)
        assert sitemap_stats(entries) == {"total_urls": 7, "static": 4, "products": 2, "pages": 1}


# ===========================================================================
# 2. Rendering
# ===========================================================================
class TestRendering:

    def test_xml_is_a_sitemaps_org_urlset(self, rows):
        entries = build_sitemap_entries(rows["products"], rows["pages"], BASE, NOW)
        xml = render_sitemap_xml(entries)
        assert xml.startswith("<?xml")

        root = ET.fromstring(xml.encode("utf-8"))
        assert root.tag == "{" + NS["sm"] + "}urlset"
        urls = root.findall("sm:url", NS)
        assert len(urls) == 7
        first_product = urls[4]
        assert first_product.find("sm:loc", NS).text == BASE + "/product/galaxy-s25"
        assert first_product.find("sm:lastmod", NS).text == "2025-05-02T00:00:00+00:00"
        assert first_product.find("sm:changefreq", NS).text == "weekly"
        assert first_product.find("sm:priority", NS).text == "0.8"

    def test_naive_lastmod_treated_as_utc(self):
        entry = SitemapEntry(BASE + "/", datetime(2025, 1, 1), "daily", 1.0)
        root = ET.fromstring(render_sitemap_xml([entry]).encode("utf-8"))
        assert root.find("sm:url/sm:lastmod", NS).text == "2025-01-01T00:00:00+00:00"

    def test_empty_sitemap(self):
        root = ET.fromstring(render_sitemap_xml([]).encode("utf-8"))
        assert root.findall("sm:url", NS) == []

    def test_robots_txt(self):
        text = render_robots_txt(BASE + "/")
        lines = text.splitlines()
        assert "User-agent: *" in lines
        assert "Allow: /" in lines
        assert "Disallow: /dashboard" in lines
        assert "Disallow: /api" in lines
        assert lines[-1] == "Sitemap: " + BASE + "/sitemap.xml"


# ===========================================================================
# 3. Database builder
# ===========================================================================
class TestSitemapBuilder:

    def test_only_published_rows(self, seeded_db):
        from storefront_seo.database import get_session_factory
        entries = SitemapBuilder(get_session_factory(), BASE).build(NOW)
        assert [e.loc for e in entries[4:]] == [
            BASE + "/product/samsung-galaxy-s25-ultra",
            BASE + "/product/galaxy-buds",
            BASE + "/about-us",
        ]

    def test_unreadable_table_keeps_the_others(self, seeded_db, caplog):
        from storefront_seo.database import get_engine, get_session_factory
        from storefront_seo.models import Page

        Page.__table__.drop(get_engine())
        entries = SitemapBuilder(get_session_factory(), BASE).build(NOW)
        assert sitemap_stats(entries) == {"total_urls": 6, "static": 4, "products": 2, "pages": 0}
        assert "Failed to load pages for the sitemap" in caplog.text

    def test_session_failure_leaves_static_routes(self, caplog):
        factory = MagicMock(side_effect=OperationalError("SELECT", {}, Exception("db down")))
        entries = SitemapBuilder(factory, BASE).build(NOW)
        assert [e.kind for e in entries] == ["static"] * 4
        assert "Failed to open a session for the sitemap" in caplog.text
