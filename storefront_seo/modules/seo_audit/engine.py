"""SEO audit engine: scores a single content item against SEO heuristics.

Every published product or page is reduced to an :class:`AuditableItem` and
run through five checks (title, description, focus keyword, slug, canonical
URL).  Each check contributes issues, warnings or successes; the score is
the share of outcomes that were successes.
"""

import enum
import logging
import math
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Thresholds
# ---------------------------------------------------------------------------

TITLE_MIN_LENGTH = 30
TITLE_MAX_LENGTH = 60
DESCRIPTION_MIN_LENGTH = 120
DESCRIPTION_MAX_LENGTH = 160
SLUG_MAX_LENGTH = 50

# ---------------------------------------------------------------------------
# Outcome messages
# ---------------------------------------------------------------------------

MISSING_TITLE = "Missing meta title"
TITLE_TOO_SHORT = "Meta title is too short (< 30 characters)"
TITLE_TOO_LONG = "Meta title is too long (> 60 characters)"
TITLE_OPTIMAL = "Meta title length is optimal"

MISSING_DESCRIPTION = "Missing meta description"
DESCRIPTION_TOO_SHORT = "Meta description is too short (< 120 characters)"
DESCRIPTION_TOO_LONG = "Meta description is too long (> 160 characters)"
DESCRIPTION_OPTIMAL = "Meta description length is optimal"

KEYWORD_DEFINED = "Focus keyword defined"
KEYWORD_IN_TITLE = "Focus keyword appears in title"
KEYWORD_NOT_IN_TITLE = "Focus keyword not found in title"
KEYWORD_IN_DESCRIPTION = "Focus keyword appears in description"
KEYWORD_NOT_IN_DESCRIPTION = "Focus keyword not found in description"
NO_KEYWORD = "No focus keyword defined"

SLUG_TOO_LONG = "URL slug is very long"
SLUG_OK = "URL slug length is good"

NO_CANONICAL = "No canonical URL set (using default)"


class ContentKind(str, enum.Enum):
    """Kind of storefront content an audit result refers to."""

    PRODUCT = "product"
    PAGE = "page"


@dataclass(frozen=True)
class SEOOverride:
    """Editor-supplied SEO fields; any of them may be unset."""

    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    focus_keyword: Optional[str] = None
    canonical_url: Optional[str] = None


@dataclass(frozen=True)
class AuditableItem:
    """Content item in the common shape the engine audits."""

    id: str
    kind: ContentKind
    title: str
    slug: str
    body_text: Optional[str] = None
    seo: Optional[SEOOverride] = None


@dataclass(frozen=True)
class AuditFinding:
    """Outcome of auditing one item.  Lists follow the check order."""

    issues: tuple[str, ...]
    warnings: tuple[str, ...]
    successes: tuple[str, ...]
    score: int

    @property
    def total_outcomes(self) -> int:
        return len(self.issues) + len(self.warnings) + len(self.successes)


def completeness_score(successes: int, total: int) -> int | float:
    """Percentage of successful outcomes, rounded half up.

    Returns ``NaN`` (with a logged warning) when there are no outcomes at
    all.  :func:`audit` always yields at least four (title, description,
    keyword, slug), so this only happens for hand-built inputs.
    """
    if total == 0:
        logger.warning("Score requested for zero check outcomes; returning NaN")
        return math.nan
    return int(math.floor(successes / total * 100 + 0.5))


def audit(item: AuditableItem) -> AuditFinding:
    """Run every SEO check against *item* and return the finding."""
    issues: list[str] = []
    warnings: list[str] = []
    successes: list[str] = []

    seo = item.seo or SEOOverride()
    title = seo.meta_title or item.title or ""
    description = seo.meta_description or item.body_text or ""

    # Meta title
    if not title:
        issues.append(MISSING_TITLE)
    elif len(title) < TITLE_MIN_LENGTH:
        warnings.append(TITLE_TOO_SHORT)
    elif len(title) > TITLE_MAX_LENGTH:
        warnings.append(TITLE_TOO_LONG)
    else:
        successes.append(TITLE_OPTIMAL)

    # Meta description
    if not description:
        issues.append(MISSING_DESCRIPTION)
    elif len(description) < DESCRIPTION_MIN_LENGTH:
        warnings.append(DESCRIPTION_TOO_SHORT)
    elif len(description) > DESCRIPTION_MAX_LENGTH:
        warnings.append(DESCRIPTION_TOO_LONG)
    else:
        successes.append(DESCRIPTION_OPTIMAL)

    # Focus keyword
    if seo.focus_keyword:
        successes.append(KEYWORD_DEFINED)
        keyword = seo.focus_keyword.lower()
        if keyword in title.lower():
            successes.append(KEYWORD_IN_TITLE)
        else:
            warnings.append(KEYWORD_NOT_IN_TITLE)
        if description and keyword in description.lower():
            successes.append(KEYWORD_IN_DESCRIPTION)
        else:
            warnings.append(KEYWORD_NOT_IN_DESCRIPTION)
    else:
        warnings.append(NO_KEYWORD)

    # Slug
    if len(item.slug or "") > SLUG_MAX_LENGTH:
        warnings.append(SLUG_TOO_LONG)
    else:
        successes.append(SLUG_OK)

    # Canonical URL: only the missing case is reported
    if not seo.canonical_url:
        warnings.append(NO_CANONICAL)

    total = len(issues) + len(warnings) + len(successes)
    return AuditFinding(
        issues=tuple(issues),
        warnings=tuple(warnings),
        successes=tuple(successes),
        score=completeness_score(len(successes), total),
    )
