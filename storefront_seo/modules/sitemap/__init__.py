"""Sitemap module: XML sitemap and robots.txt generation."""

from storefront_seo.modules.sitemap.generator import (
    SitemapBuilder,
    SitemapEntry,
    build_sitemap_entries,
    render_robots_txt,
    render_sitemap_xml,
    sitemap_stats,
)

__all__ = [
    "SitemapBuilder",
    "SitemapEntry",
    "build_sitemap_entries",
    "render_robots_txt",
    "render_sitemap_xml",
    "sitemap_stats",
]
