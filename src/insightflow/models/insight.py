"""Insight records consumed by the prioritization engine.

Insights are produced upstream (by whatever analysed the user's notes) and are
treated as read-only here. Records can be built directly or loaded from JSON
exports using either snake_case or camelCase keys.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from insightflow.models.enums import EvidenceType, InsightCategory, InsightType


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_aware(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def parse_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return ensure_aware(value)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        return ensure_aware(datetime.fromisoformat(text))
    raise ValueError(f"Unsupported datetime value: {value!r}")


def _pick(data: Dict[str, Any], snake: str, camel: str, default: Any = None) -> Any:
    if snake in data:
        return data[snake]
    return data.get(camel, default)


def _check_unit_interval(name: str, value: float) -> None:
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"{name} must be between 0 and 1")


@dataclass
class InsightEvidence:
    """A single excerpt supporting an insight."""

    excerpt: str
    relevance_score: float = 0.5
    document_path: str = ""
    timestamp: Optional[datetime] = None
    evidence_type: EvidenceType = EvidenceType.DOCUMENT

    def __post_init__(self) -> None:
        _check_unit_interval("relevance_score", self.relevance_score)
        if self.timestamp is not None:
            self.timestamp = ensure_aware(self.timestamp)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "excerpt": self.excerpt,
            "relevance_score": self.relevance_score,
            "document_path": self.document_path,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "evidence_type": self.evidence_type.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InsightEvidence":
        timestamp = data.get("timestamp")
        return cls(
            excerpt=data.get("excerpt", ""),
            relevance_score=float(_pick(data, "relevance_score", "relevanceScore", 0.5)),
            document_path=_pick(data, "document_path", "documentPath", ""),
            timestamp=parse_datetime(timestamp) if timestamp else None,
            evidence_type=EvidenceType(_pick(data, "evidence_type", "type", EvidenceType.DOCUMENT.value)),
        )


@dataclass
class DateRange:
    """Period an insight covers; only ``end`` is mandatory."""

    end: datetime
    start: Optional[datetime] = None

    def __post_init__(self) -> None:
        self.end = ensure_aware(self.end)
        if self.start is not None:
            self.start = ensure_aware(self.start)
            if self.start > self.end:
                raise ValueError("timeframe start must not be after end")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start": self.start.isoformat() if self.start else None,
            "end": self.end.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DateRange":
        start = data.get("start")
        return cls(
            end=parse_datetime(data["end"]),
            start=parse_datetime(start) if start else None,
        )


@dataclass
class Insight:
    """A scored observation about personal content.

    Attributes:
        id: Unique identifier assigned upstream
        title: Short summary used for similarity checks
        description: Full text, scanned for opportunity cues
        category: Domain tag
        type: Kind of observation
        confidence: How sure the producer is (0.0 to 1.0)
        importance: Estimated impact (0.0 to 1.0)
        actionability: How directly it can be acted on (0.0 to 1.0)
        novelty: How new it is to the user (0.0 to 1.0)
        evidence: Ordered supporting excerpts
        timeframe: Period the insight covers
        related_insights: Ids of related insights
        keywords: Extracted keywords
        suggested_actions: Actions proposed by the producer
    """

    id: str
    category: InsightCategory
    type: InsightType
    timeframe: DateRange
    title: str = ""
    description: str = ""
    confidence: float = 0.5
    importance: float = 0.5
    actionability: float = 0.5
    novelty: float = 0.5
    evidence: List[InsightEvidence] = field(default_factory=list)
    related_insights: List[str] = field(default_factory=list)
    keywords: List[str] = field(default_factory=list)
    suggested_actions: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("id is required")
        for name in ("confidence", "importance", "actionability", "novelty"):
            _check_unit_interval(name, getattr(self, name))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "category": self.category.value,
            "type": self.type.value,
            "confidence": self.confidence,
            "importance": self.importance,
            "actionability": self.actionability,
            "novelty": self.novelty,
            "evidence": [item.to_dict() for item in self.evidence],
            "timeframe": self.timeframe.to_dict(),
            "related_insights": list(self.related_insights),
            "keywords": list(self.keywords),
            "suggested_actions": list(self.suggested_actions),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Insight":
        """Create from an exported record; accepts snake_case or camelCase keys."""
        timeframe = data.get("timeframe") or {"end": utc_now()}
        return cls(
            id=str(data["id"]),
            title=data.get("title", ""),
            description=data.get("description", ""),
            category=InsightCategory(data["category"]),
            type=InsightType(data["type"]),
            confidence=float(data.get("confidence", 0.5)),
            importance=float(data.get("importance", 0.5)),
            actionability=float(data.get("actionability", 0.5)),
            novelty=float(data.get("novelty", 0.5)),
            evidence=[InsightEvidence.from_dict(item) for item in data.get("evidence", [])],
            timeframe=DateRange.from_dict(timeframe),
            related_insights=list(_pick(data, "related_insights", "relatedInsights", [])),
            keywords=list(data.get("keywords", [])),
            suggested_actions=list(_pick(data, "suggested_actions", "suggestedActions", [])),
        )
