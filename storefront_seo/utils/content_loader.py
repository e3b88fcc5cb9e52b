"""Import a storefront content export (YAML or JSON) into the database.

Expected document shape::

    products:
      - title: Samsung Galaxy S25 Ultra
        slug: samsung-galaxy-s25-ultra
        description: ...
        seo:
          meta_title: ...
          focus_keyword: galaxy s25
    pages:
      - title: About us
        slug: about-us
        content: ...

Existing rows are matched by slug and updated in place.
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional

import yaml
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import FlushError

from storefront_seo.database import get_session
from storefront_seo.models import Page, Product, SEOMetadata
from storefront_seo.models.catalog import STATUS_PUBLISHED, STATUSES
from storefront_seo.models.seo import ENTITY_PAGE, ENTITY_PRODUCT

logger = logging.getLogger(__name__)

_SEO_COLUMNS = (
    "meta_title", "meta_description", "focus_keyword", "canonical_url",
    "og_title", "og_description", "og_image", "robots", "structured_data",
)


class ContentLoadError(ValueError):
    """Raised when a content export cannot be read or is malformed."""


def read_content_file(path: str | Path) -> dict[str, Any]:
    """Parse a ``.yaml``/``.yml``/``.json`` export into a dict."""
    path = Path(path)
    if not path.exists():
        raise ContentLoadError(f"Content file not found: {path}")

    suffix = path.suffix.lower()
    try:
        with open(path, "r", encoding="utf-8") as fh:
            if suffix in (".yaml", ".yml"):
                data = yaml.safe_load(fh)
            elif suffix == ".json":
                data = json.load(fh)
            else:
                raise ContentLoadError(f"Unsupported content file type: {suffix or '(none)'}")
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ContentLoadError(f"Could not parse {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ContentLoadError(f"{path} must contain a mapping with 'products' and/or 'pages'.")
    return data


def _price(record: dict[str, Any], label: str) -> Optional[float]:
    value = record.get("price")
    if value is None:
        return None
    if isinstance(value, bool):
        raise ContentLoadError(f"{label} has an invalid price: {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ContentLoadError(f"{label} has an invalid price: {value!r}") from exc


def _records(data: dict[str, Any], key: str) -> list[dict[str, Any]]:
    records = data.get(key) or []
    if not isinstance(records, list):
        raise ContentLoadError(f"'{key}' must be a list.")
    for index, record in enumerate(records):
        label = f"{key}[{index}]"
        if not isinstance(record, dict):
            raise ContentLoadError(f"{label} must be a mapping.")
        if not record.get("title") or not record.get("slug"):
            raise ContentLoadError(f"{label} needs both 'title' and 'slug'.")
        status = record.get("status")
        if status is not None and status not in STATUSES:
            raise ContentLoadError(
                f"{label} has an unknown status {status!r}; expected one of {', '.join(STATUSES)}."
            )
        _price(record, label)
    return records


def _upsert(session: Session, model, record: dict[str, Any], body_field: str, label: str):
    row = session.scalars(select(model).where(model.slug == record["slug"])).first()
    if row is None:
        row = model(slug=record["slug"])
        if record.get("id"):
            row.id = str(record["id"])
        session.add(row)
    row.title = record["title"]
    # An explicit null status still means published.
    row.status = record.get("status") or STATUS_PUBLISHED
    setattr(row, body_field, record.get(body_field))
    price = _price(record, label)
    if model is Product and price is not None:
        row.price = price
    try:
        session.flush()
    except (IntegrityError, FlushError) as exc:
        raise ContentLoadError(
            f"{label} (slug {record['slug']!r}) conflicts with an existing row; "
            f"id {record.get('id')!r} is already used by another slug."
        ) from exc
    return row


def _upsert_seo(session: Session, entity_type: str, entity_id: str, seo: Any) -> None:
    if not seo:
        return
    if not isinstance(seo, dict):
        raise ContentLoadError(f"SEO block for {entity_type} {entity_id} must be a mapping.")
    row = session.scalars(
        select(SEOMetadata).where(
            SEOMetadata.entity_type == entity_type,
            SEOMetadata.entity_id == entity_id,
        )
    ).first()
    if row is None:
        row = SEOMetadata(entity_type=entity_type, entity_id=entity_id)
        session.add(row)
    for column in _SEO_COLUMNS:
        if column in seo:
            setattr(row, column, seo[column])


def import_content(data: dict[str, Any]) -> dict[str, int]:
    """Write products, pages and their SEO blocks; return counts per type."""
    products = _records(data, "products")
    pages = _records(data, "pages")

    with get_session() as session:
        for index, record in enumerate(products):
            row = _upsert(session, Product, record, "description", f"products[{index}]")
            _upsert_seo(session, ENTITY_PRODUCT, row.id, record.get("seo"))
        for index, record in enumerate(pages):
            row = _upsert(session, Page, record, "content", f"pages[{index}]")
            _upsert_seo(session, ENTITY_PAGE, row.id, record.get("seo"))

    logger.info("Imported %d products and %d pages", len(products), len(pages))
    return {"products": len(products), "pages": len(pages)}


def load_content_file(path: str | Path) -> dict[str, int]:
    """Read *path* and import it in one step."""
    return import_content(read_content_file(path))
