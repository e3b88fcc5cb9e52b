"""Audit Report Assembler: audits every published item and ranks the results.

Results are sorted ascending by score so the items needing the most
attention come first.  Python's sort is stable, so equal scores keep the
repository's order.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterable

from storefront_seo.modules.seo_audit.engine import AuditableItem, ContentKind, audit
from storefront_seo.modules.seo_audit.repository import ContentRepository

logger = logging.getLogger(__name__)

FILTER_ALL = "all"
FILTER_CRITICAL = "critical"
FILTER_WARNING = "warning"
FILTER_GOOD = "good"
FILTERS = (FILTER_ALL, FILTER_CRITICAL, FILTER_WARNING, FILTER_GOOD)

_SCORE_LABELS = [
    (80, "Good"),
    (60, "Needs Work"),
    (0, "Critical"),
]

_EDIT_SEGMENTS = {
    ContentKind.PRODUCT: "products",
    ContentKind.PAGE: "pages",
}


@dataclass(frozen=True)
class AuditResult:
    """Finding tagged with the identity of the item it was computed for."""

    id: str
    kind: ContentKind
    title: str
    slug: str
    score: int
    issues: tuple[str, ...]
    warnings: tuple[str, ...]
    successes: tuple[str, ...]

    @property
    def bucket(self) -> str:
        if self.issues:
            return FILTER_CRITICAL
        if self.warnings:
            return FILTER_WARNING
        return FILTER_GOOD

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.kind.value,
            "title": self.title,
            "slug": self.slug,
            "score": self.score,
            "issues": list(self.issues),
            "warnings": list(self.warnings),
            "successes": list(self.successes),
        }


def score_label(score: float) -> str:
    """Human label for a score: Good, Needs Work or Critical."""
    for threshold, label in _SCORE_LABELS:
        if score >= threshold:
            return label
    return "Critical"


def filter_results(results: Iterable[AuditResult], name: str = FILTER_ALL) -> list[AuditResult]:
    """Keep only the results that fall into bucket *name*.

    Raises:
        ValueError: if *name* is not one of :data:`FILTERS`.
    """
    if name not in FILTERS:
        raise ValueError(f"Unknown audit filter: {name!r}. Expected one of {', '.join(FILTERS)}.")
    if name == FILTER_ALL:
        return list(results)
    return [r for r in results if r.bucket == name]


def summarize(results: Iterable[AuditResult]) -> dict[str, int]:
    """Count results per bucket, plus the overall total."""
    counts = {"total": 0, FILTER_CRITICAL: 0, FILTER_WARNING: 0, FILTER_GOOD: 0}
    for result in results:
        counts["total"] += 1
        counts[result.bucket] += 1
    return counts


class AuditReportAssembler:
    """Builds the sorted audit report from a content repository.

    Usage::

        assembler = AuditReportAssembler(SQLAlchemyContentRepository(factory))
        results = assembler.build_report()
        critical = filter_results(results, "critical")
    """

    def __init__(self, repository: ContentRepository, edit_path_prefix: str = "/dashboard") -> None:
        self._repository = repository
        self._edit_prefix = edit_path_prefix.rstrip("/")

    def build_report(self) -> list[AuditResult]:
        """Fetch every published item, audit it, and sort worst first."""
        items = self._repository.list_published_auditable_items()
        results = self.audit_items(items)
        logger.info(
            "SEO audit complete: %d items, %d critical",
            len(results), sum(1 for r in results if r.issues),
        )
        return results

    @staticmethod
    def audit_items(items: Iterable[AuditableItem]) -> list[AuditResult]:
        """Audit *items* in order and return results sorted ascending by score."""
        results = []
        for item in items:
            finding = audit(item)
            results.append(AuditResult(
                id=item.id,
                kind=item.kind,
                title=item.title,
                slug=item.slug,
                score=finding.score,
                issues=finding.issues,
                warnings=finding.warnings,
                successes=finding.successes,
            ))
        results.sort(key=lambda r: r.score)
        return results

    def edit_path(self, result: AuditResult) -> str:
        """Dashboard path of the edit form for the audited item."""
        return f"{self._edit_prefix}/{_EDIT_SEGMENTS[result.kind]}/{result.id}"
