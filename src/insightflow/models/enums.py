"""Closed enumerations shared by the prioritization engine and the pipeline."""

from __future__ import annotations

from enum import Enum


class InsightCategory(str, Enum):
    """Domain tag attached to every insight."""

    PRODUCTIVITY = "productivity"
    WELLBEING = "wellbeing"
    RELATIONSHIPS = "relationships"
    LEARNING = "learning"
    GOALS = "goals"
    HABITS = "habits"
    CHALLENGES = "challenges"
    OPPORTUNITIES = "opportunities"
    PATTERNS = "patterns"
    TRENDS = "trends"
    ACHIEVEMENTS = "achievements"
    CONCERNS = "concerns"


class InsightType(str, Enum):
    """Kind of observation an insight represents."""

    OBSERVATION = "observation"
    CORRELATION = "correlation"
    CAUSATION = "causation"
    PREDICTION = "prediction"
    RECOMMENDATION = "recommendation"
    WARNING = "warning"
    OPPORTUNITY = "opportunity"
    ACHIEVEMENT = "achievement"
    PATTERN = "pattern"
    ANOMALY = "anomaly"


class EvidenceType(str, Enum):
    THEME = "theme"
    PATTERN = "pattern"
    DOCUMENT = "document"
    STATISTIC = "statistic"
    TREND = "trend"


class RecommendationType(str, Enum):
    """Kind of recommendation an opportunity or template produces."""

    ACTION = "action"
    HABIT = "habit"
    DECISION = "decision"
    LEARNING = "learning"
    OPTIMIZATION = "optimization"
    HEALTH = "health"
    CAREER = "career"
    PRODUCTIVITY = "productivity"
    REFLECTION = "reflection"
    GOAL = "goal"
    INVESTIGATION = "investigation"
    PREVENTION = "prevention"
    RELATIONSHIP = "relationship"
    CREATIVE = "creative"
    FINANCIAL = "financial"


class Urgency(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class Difficulty(str, Enum):
    EASY = "easy"
    MODERATE = "moderate"
    CHALLENGING = "challenging"
    COMPLEX = "complex"


class Timeframe(str, Enum):
    IMMEDIATE = "immediate"
    SHORT_TERM = "short-term"
    MEDIUM_TERM = "medium-term"
    LONG_TERM = "long-term"


class Directness(str, Enum):
    """How assertively a recommendation is phrased."""

    SUGGESTION = "suggestion"
    RECOMMENDATION = "recommendation"
    STRONG_RECOMMENDATION = "strong-recommendation"
    IMPERATIVE = "imperative"


class GenerationMethod(str, Enum):
    TEMPLATE = "template"
    AI = "ai"


class TemplateUsage(str, Enum):
    FREQUENT = "frequent"
    OCCASIONAL = "occasional"
    RARE = "rare"


class Purpose(str, Enum):
    """Why the caller is prioritizing insights."""

    DAILY_REVIEW = "daily-review"
    WEEKLY_SUMMARY = "weekly-summary"
    MONTHLY_REPORT = "monthly-report"
    PROJECT_REVIEW = "project-review"
    CUSTOM = "custom"


class Audience(str, Enum):
    SELF = "self"
    TEAM = "team"
    MANAGER = "manager"
    PUBLIC = "public"


class GenerationScope(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUAL = "annual"


class IssueSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class IssueType(str, Enum):
    MISSING_FIELD = "missing-field"
    INVALID_VALUE = "invalid-value"
    QUALITY_CONCERN = "quality-concern"


def ensure_covered(table: dict, enum_cls: type[Enum], name: str) -> dict:
    """Fail at import time when a lookup table misses an enum member."""
    missing = [member.value for member in enum_cls if member not in table]
    if missing:
        raise RuntimeError(f"{name} is missing entries for: {', '.join(missing)}")
    return table
