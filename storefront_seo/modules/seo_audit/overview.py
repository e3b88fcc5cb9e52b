"""SEO overview helpers: coverage stats, meta tag listing, keyword usage."""

from collections import Counter
from typing import Any, Iterable, Optional

from storefront_seo.modules.seo_audit.assembler import AuditResult
from storefront_seo.modules.seo_audit.engine import (
    DESCRIPTION_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    AuditableItem,
    ContentKind,
)

META_FILTERS = ("all", "complete", "missing")


def _meta_title(item: AuditableItem) -> str:
    return (item.seo.meta_title if item.seo else None) or ""


def _meta_description(item: AuditableItem) -> str:
    return (item.seo.meta_description if item.seo else None) or ""


def compute_overview_stats(
    items: Iterable[AuditableItem],
    results: Optional[Iterable[AuditResult]] = None,
) -> dict[str, Any]:
    """Site-wide SEO coverage numbers for the overview screen.

    Only explicit overrides count here; display titles and body text are
    not treated as meta tags.
    """
    items = list(items)
    total = len(items)
    with_seo = sum(1 for i in items if _meta_title(i))
    stats: dict[str, Any] = {
        "total_pages": total,
        "products": sum(1 for i in items if i.kind == ContentKind.PRODUCT),
        "pages": sum(1 for i in items if i.kind == ContentKind.PAGE),
        "with_seo": with_seo,
        "missing_meta_title": total - with_seo,
        "missing_meta_description": sum(1 for i in items if not _meta_description(i)),
        "completion_rate": round(with_seo / total * 100, 1) if total else 0,
        "avg_seo_score": 0,
    }
    scores = [r.score for r in results or []]
    if scores:
        stats["avg_seo_score"] = round(sum(scores) / len(scores), 1)
    return stats


def list_meta_tags(items: Iterable[AuditableItem], filter_name: str = "all") -> list[dict[str, Any]]:
    """Rows for the meta tags manager, ordered by title.

    ``complete`` keeps items with both a meta title and a meta description
    override; ``missing`` keeps the rest.
    """
    if filter_name not in META_FILTERS:
        raise ValueError(f"Unknown meta tag filter: {filter_name!r}. Expected one of {', '.join(META_FILTERS)}.")

    rows = []
    for item in sorted(items, key=lambda i: i.title.lower()):
        meta_title = _meta_title(item)
        meta_description = _meta_description(item)
        complete = bool(meta_title and meta_description)
        if filter_name == "complete" and not complete:
            continue
        if filter_name == "missing" and complete:
            continue
        rows.append({
            "id": item.id,
            "type": item.kind.value,
            "title": item.title,
            "slug": item.slug,
            "meta_title": meta_title,
            "meta_title_length": f"{len(meta_title)}/{TITLE_MAX_LENGTH}",
            "meta_description": meta_description,
            "meta_description_length": f"{len(meta_description)}/{DESCRIPTION_MAX_LENGTH}",
            "complete": complete,
        })
    return rows


def keyword_usage(items: Iterable[AuditableItem]) -> list[tuple[str, int]]:
    """Focus keywords (lowercased, trimmed) with usage counts, most used first."""
    counts: Counter[str] = Counter()
    for item in items:
        keyword = item.seo.focus_keyword if item.seo else None
        if keyword and keyword.strip():
            counts[keyword.strip().lower()] += 1
    # Counter.most_common keeps first-seen order among equal counts.
    return counts.most_common()
