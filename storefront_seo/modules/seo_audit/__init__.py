"""SEO Audit module: scoring engine, content adapters, repository, and report assembly."""

from storefront_seo.modules.seo_audit.assembler import (
    FILTERS,
    AuditReportAssembler,
    AuditResult,
    filter_results,
    score_label,
    summarize,
)
from storefront_seo.modules.seo_audit.engine import (
    AuditableItem,
    AuditFinding,
    ContentKind,
    SEOOverride,
    audit,
)
from storefront_seo.modules.seo_audit.repository import (
    ContentRepository,
    InMemoryContentRepository,
    SQLAlchemyContentRepository,
)

__all__ = [
    "FILTERS",
    "AuditReportAssembler",
    "AuditResult",
    "AuditableItem",
    "AuditFinding",
    "ContentKind",
    "ContentRepository",
    "InMemoryContentRepository",
    "SEOOverride",
    "SQLAlchemyContentRepository",
    "audit",
    "filter_results",
    "score_label",
    "summarize",
]
