# pocketpal/core/enrichment.py
"""
Attaches the best-matching lesson from the catalog to AI-generated content.

Scoring, per lesson keyword:
    +1 when the item's text (title/headline, summary, related topic) contains it
    +2 when one of the item's own keywords contains it

The highest score wins. Ties keep the earlier catalog entry, and a best score
of zero means no lesson at all. Upstream content is untrusted, so missing or
oddly typed fields count as empty instead of raising.
"""
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from pocketpal.core.lessons import LESSON_CATALOG
from pocketpal.core.models import Insight, LessonCatalogEntry, NewsItem


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _optional_text(value: Any) -> Optional[str]:
    return None if value is None else _text(value)


def _item_keywords(raw_keywords: Any) -> List[str]:
    if not isinstance(raw_keywords, (list, tuple)):
        return []
    return [k.lower() for k in raw_keywords if isinstance(k, str)]


def build_haystack(primary: Any, summary: Any, related_topic: Any = None) -> str:
    parts = [_text(primary), _text(summary)]
    if related_topic:
        parts.append(_text(related_topic))
    return " ".join(parts).lower()


def score_lesson(lesson: LessonCatalogEntry, haystack: str, item_keywords: Iterable[str]) -> int:
    item_keywords = list(item_keywords)
    score = 0
    for keyword in lesson.keywords:
        keyword = keyword.lower()
        if keyword in haystack:
            score += 1
        if any(keyword in item_keyword for item_keyword in item_keywords):
            score += 2
    return score


def match_lesson(
    haystack: str,
    item_keywords: Iterable[str],
    catalog: Sequence[LessonCatalogEntry] = LESSON_CATALOG,
) -> Tuple[Optional[LessonCatalogEntry], int]:
    """Returns (best lesson or None, its score)."""
    item_keywords = [k.lower() for k in item_keywords]
    best_lesson = None
    best_score = 0
    for lesson in catalog:
        score = score_lesson(lesson, haystack, item_keywords)
        if score > best_score:
            best_lesson = lesson
            best_score = score
    return best_lesson, best_score


def _lesson_fields(lesson: Optional[LessonCatalogEntry]) -> Dict[str, Any]:
    return {
        "related_lesson_id": lesson.id if lesson else None,
        "related_lesson_title": lesson.title if lesson else None,
    }


def enrich_insight(raw: Dict[str, Any]) -> Insight:
    haystack = build_haystack(raw.get("title"), raw.get("summary"))
    lesson, _ = match_lesson(haystack, _item_keywords(raw.get("keywords")))
    return Insight(
        id=_optional_text(raw.get("id")),
        title=_optional_text(raw.get("title")),
        summary=_optional_text(raw.get("summary")),
        category=_optional_text(raw.get("category")),
        impact=_optional_text(raw.get("impact")),
        **_lesson_fields(lesson),
    )


def enrich_news_item(raw: Dict[str, Any]) -> NewsItem:
    haystack = build_haystack(raw.get("headline"), raw.get("summary"), raw.get("relatedTopic"))
    lesson, _ = match_lesson(haystack, _item_keywords(raw.get("keywords")))
    return NewsItem(
        id=_optional_text(raw.get("id")),
        headline=_optional_text(raw.get("headline")),
        summary=_optional_text(raw.get("summary")),
        category=_optional_text(raw.get("category")),
        sentiment=_optional_text(raw.get("sentiment")),
        related_topic=_optional_text(raw.get("relatedTopic")),
        **_lesson_fields(lesson),
    )
