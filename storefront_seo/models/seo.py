"""SEO metadata override model shared by products and pages."""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, JSON, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from storefront_seo.database import Base

ENTITY_PRODUCT = "product"
ENTITY_PAGE = "page"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SEOMetadata(Base):
    """Per-entity SEO override, keyed by ``(entity_type, entity_id)``.

    ``entity_type`` is ``"product"`` or ``"page"``; ``entity_id`` is the id of
    the row in the matching table.  At most one record exists per entity.
    """

    __tablename__ = "seo_metadata"
    __table_args__ = (
        UniqueConstraint("entity_type", "entity_id", name="uq_seo_metadata_entity"),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    entity_type: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    entity_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    meta_title: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    meta_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    focus_keyword: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    canonical_url: Mapped[Optional[str]] = mapped_column(String(2048), nullable=True)
    og_title: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    og_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    og_image: Mapped[Optional[str]] = mapped_column(String(2048), nullable=True)
    robots: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    structured_data: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow
    )

    def __repr__(self) -> str:
        return (
            f"<SEOMetadata id={self.id} entity={self.entity_type}:{self.entity_id} "
            f"keyword={self.focus_keyword!r}>"
        )
