"""Map products and pages into the engine's common :class:`AuditableItem` shape."""

from collections.abc import Mapping
from typing import Any, Optional

from storefront_seo.modules.seo_audit.engine import AuditableItem, ContentKind, SEOOverride

_SEO_FIELDS = ("meta_title", "meta_description", "focus_keyword", "canonical_url")


def _field(record: Any, name: str, default: Any = None) -> Any:
    """Read *name* from a mapping or an attribute-style object (e.g. ORM row)."""
    if isinstance(record, Mapping):
        return record.get(name, default)
    return getattr(record, name, default)


def normalize_seo(value: Any) -> Optional[SEOOverride]:
    """Collapse a joined SEO value into a single optional override.

    The join may produce nothing, a single record, or a list of records
    (only the first one is used).  Records may be mappings or objects.
    """
    if value is None:
        return None
    if isinstance(value, SEOOverride):
        return value
    if isinstance(value, (list, tuple)):
        if not value:
            return None
        return normalize_seo(value[0])
    return SEOOverride(**{name: _field(value, name) for name in _SEO_FIELDS})


def _to_item(record: Any, kind: ContentKind, body_field: str, seo: Any) -> AuditableItem:
    if seo is None:
        seo = _field(record, "seo_metadata")
    return AuditableItem(
        id=str(_field(record, "id", "")),
        kind=kind,
        title=_field(record, "title") or "",
        slug=_field(record, "slug") or "",
        body_text=_field(record, body_field),
        seo=normalize_seo(seo),
    )


def product_to_item(record: Any, seo: Any = None) -> AuditableItem:
    """Adapt a product; its ``description`` is the description fallback."""
    return _to_item(record, ContentKind.PRODUCT, "description", seo)


def page_to_item(record: Any, seo: Any = None) -> AuditableItem:
    """Adapt a CMS page; its ``content`` is the description fallback."""
    return _to_item(record, ContentKind.PAGE, "content", seo)
