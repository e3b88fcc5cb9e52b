"""Storefront SEO: audit and overview tooling for catalog content."""

__version__ = "1.0.0"
