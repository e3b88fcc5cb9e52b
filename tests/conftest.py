"""Shared pytest fixtures for Storefront SEO tests."""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Ensure project root is on sys.path so 'storefront_seo' is importable.
_project_root = str(Path(__file__).resolve().parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)


@pytest.fixture(autouse=True)
def _reset_db_engine():
    """Autouse fixture: reset the global DB engine before and after every test.

    This prevents cross-test pollution when tests create their own in-memory
    databases.
    """
    from storefront_seo.database import reset_engine
    reset_engine()
    yield
    reset_engine()


@pytest.fixture()
def test_db():
    """Provide an in-memory SQLite database with all tables created.

    Yields a database URL string. The engine is automatically torn down
    after the test by the autouse ``_reset_db_engine`` fixture.
    """
    from storefront_seo.database import init_db
    db_url = "sqlite:///:memory:"
    init_db(database_url=db_url, echo=False)
    yield db_url


@pytest.fixture()
def make_item():
    """Factory for AuditableItem with sensible, fully optimised defaults."""
    from storefront_seo.modules.seo_audit import AuditableItem, ContentKind, SEOOverride

    def _make(
        id="item-1",
        kind=ContentKind.PRODUCT,
        title="Samsung Galaxy S25 Ultra Review And Specs",
        slug="samsung-galaxy-s25-ultra",
        body_text=None,
        seo=None,
        **seo_fields,
    ):
        if seo is None and seo_fields:
            seo = SEOOverride(**seo_fields)
        return AuditableItem(
            id=id, kind=kind, title=title, slug=slug, body_text=body_text, seo=seo,
        )

    return _make


@pytest.fixture()
def optimal_description():
    """A 140-character description containing 'galaxy s25'."""
    text = "The Samsung Galaxy S25 Ultra brings a brighter display, longer battery life and a sharper camera to the flagship line this year."
    text = text + "x" * (140 - len(text))
    assert len(text) == 140
    return text


@pytest.fixture()
def seeded_db(test_db, optimal_description):
    """In-memory DB with published, draft and SEO-annotated content.

    Creation times are spaced out so ordering is deterministic.
    """
    from storefront_seo.database import get_session
    from storefront_seo.models import Page, Product, SEOMetadata

    base = datetime(2025, 1, 1, tzinfo=timezone.utc)
    with get_session() as session:
        session.add_all([
            Product(
                id="p-1", title="Samsung Galaxy S25 Ultra Review And Specs",
                slug="samsung-galaxy-s25-ultra", description="Short",
                status="published", created_at=base,
            ),
            Product(
                id="p-2", title="Galaxy Buds", slug="galaxy-buds",
                description=None, status="published",
                created_at=base + timedelta(minutes=1),
            ),
            Product(
                id="p-draft", title="Unreleased Fold", slug="unreleased-fold",
                description="Secret", status="draft",
                created_at=base + timedelta(minutes=2),
            ),
            Page(
                id="pg-1", title="About Us", slug="about-us",
                content="We are a Samsung reseller.", status="published",
                created_at=base + timedelta(minutes=3),
            ),
            Page(
                id="pg-archived", title="Old Promo", slug="old-promo",
                content="Gone", status="archived",
                created_at=base + timedelta(minutes=4),
            ),
            SEOMetadata(
                entity_type="product", entity_id="p-1",
                meta_description=optimal_description,
                focus_keyword="galaxy s25",
                canonical_url="https://shop.example.com/product/samsung-galaxy-s25-ultra",
            ),
            SEOMetadata(
                entity_type="page", entity_id="pg-1",
                meta_title="About Our Samsung Reseller Shop",
            ),
        ])
    yield test_db
