"""Template registry and placeholder rendering.

The registry is an explicit object injected into a generator, so separate
pipelines (for example one per domain) hold independent template sets.
Readers work on an immutable snapshot; writers build a new mapping and swap
it in under a lock.
"""

from __future__ import annotations

import logging
import re
import threading
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional

from insightflow.errors import TemplateError
from insightflow.models.enums import (
    InsightCategory,
    InsightType,
    RecommendationType,
    TemplateUsage,
)
from insightflow.models.recommendation import RecommendationTemplate

logger = logging.getLogger(__name__)

PLACEHOLDER_PATTERN = re.compile(r"\{\{\s*([A-Za-z_][A-Za-z0-9_]*)\s*\}\}")


def find_placeholders(text: str) -> List[str]:
    return PLACEHOLDER_PATTERN.findall(text)


def fill_template(text: str, variables: Mapping[str, str]) -> str:
    """Replace ``{{name}}`` tokens; unknown names are left in place."""

    def _substitute(match: re.Match) -> str:
        name = match.group(1)
        if name in variables:
            return str(variables[name])
        return match.group(0)

    return PLACEHOLDER_PATTERN.sub(_substitute, text)


def template_texts(template: RecommendationTemplate) -> List[str]:
    texts = [template.title_template, template.description_template, *template.action_steps_template]
    for variation in template.variations:
        texts.extend(filter(None, [variation.title_variation, variation.description_variation]))
        texts.extend(variation.action_steps_variation or [])
    return texts


def validate_template(template: RecommendationTemplate) -> None:
    """Raise TemplateError when a template cannot be rendered reliably."""
    problems = []
    if not template.id.strip():
        problems.append("id is required")
    if not template.title_template.strip():
        problems.append("title_template is required")
    if not template.description_template.strip():
        problems.append("description_template is required")
    if not 0.0 <= template.effectiveness <= 1.0:
        problems.append("effectiveness must be between 0 and 1")
    if not 0.0 <= template.minimum_confidence <= 1.0:
        problems.append("minimum_confidence must be between 0 and 1")

    declared = set(template.variables)
    undeclared = sorted(
        {name for text in template_texts(template) for name in find_placeholders(text)} - declared
    )
    if undeclared:
        problems.append(f"undeclared placeholders: {', '.join(undeclared)}")

    if problems:
        raise TemplateError(
            f"Template {template.id or '<unnamed>'} is invalid: {'; '.join(problems)}",
            details={"template_id": template.id, "problems": problems},
        )


BASIC_ACTION_TEMPLATE = RecommendationTemplate(
    id="basic-action",
    name="Basic Action Recommendation",
    type=RecommendationType.ACTION,
    category=InsightCategory.PRODUCTIVITY,
    title_template="Take action on {{insight_topic}}",
    description_template=(
        "Based on your pattern of {{insight_description}}, consider taking specific "
        "action to {{suggested_outcome}}."
    ),
    action_steps_template=[
        "Assess the current situation",
        "Define specific goals",
        "Create an implementation plan",
        "Set up tracking mechanisms",
    ],
    applicable_insight_types=[InsightType.PATTERN, InsightType.OBSERVATION, InsightType.ANOMALY],
    minimum_confidence=0.3,
    required_evidence=1,
    variables=["insight_topic", "insight_description", "suggested_outcome"],
    usage=TemplateUsage.FREQUENT,
    effectiveness=0.7,
)

DEFAULT_TEMPLATES = (BASIC_ACTION_TEMPLATE,)


class TemplateRegistry:
    """Holds recommendation templates keyed by id.

    Example Usage:
        registry = TemplateRegistry()
        registry.register(my_template)
        best = registry.find_best(RecommendationType.HABIT)
    """

    def __init__(
        self,
        templates: Optional[Iterable[RecommendationTemplate]] = None,
        *,
        load_defaults: bool = True,
    ) -> None:
        self._lock = threading.Lock()
        self._snapshot: Mapping[str, RecommendationTemplate] = MappingProxyType({})
        if load_defaults:
            self.load_defaults()
        if templates:
            self.register_many(templates)

    # Writers --------------------------------------------------------------

    def register(self, template: RecommendationTemplate) -> None:
        """Add or replace a template after validating it."""
        self.register_many([template])

    def register_many(self, templates: Iterable[RecommendationTemplate]) -> None:
        templates = list(templates)
        for template in templates:
            validate_template(template)
        with self._lock:
            updated: Dict[str, RecommendationTemplate] = dict(self._snapshot)
            for template in templates:
                updated[template.id] = template
            self._snapshot = MappingProxyType(updated)
        logger.debug(f"Registered {len(templates)} templates ({len(self._snapshot)} total)")

    def update(self, template: RecommendationTemplate) -> None:
        """Replace an existing template; raises TemplateError if it is unknown."""
        validate_template(template)
        with self._lock:
            if template.id not in self._snapshot:
                raise TemplateError(
                    f"Template {template.id} is not registered",
                    details={"template_id": template.id},
                )
            updated = dict(self._snapshot)
            updated[template.id] = template
            self._snapshot = MappingProxyType(updated)

    def remove(self, template_id: str) -> bool:
        with self._lock:
            if template_id not in self._snapshot:
                return False
            updated = dict(self._snapshot)
            del updated[template_id]
            self._snapshot = MappingProxyType(updated)
        return True

    def load_defaults(self) -> None:
        self.register_many(DEFAULT_TEMPLATES)

    def clear(self) -> None:
        with self._lock:
            self._snapshot = MappingProxyType({})

    # Readers --------------------------------------------------------------

    def snapshot(self) -> Mapping[str, RecommendationTemplate]:
        return self._snapshot

    def get(self, template_id: str) -> Optional[RecommendationTemplate]:
        return self._snapshot.get(template_id)

    def templates(self) -> List[RecommendationTemplate]:
        return list(self._snapshot.values())

    def find_best(self, opportunity_type: RecommendationType) -> Optional[RecommendationTemplate]:
        """Most effective template of the given type; ties keep registration order."""
        best: Optional[RecommendationTemplate] = None
        for template in self._snapshot.values():
            if template.type != opportunity_type:
                continue
            if best is None or template.effectiveness > best.effectiveness:
                best = template
        return best

    def __len__(self) -> int:
        return len(self._snapshot)

    def __contains__(self, template_id: object) -> bool:
        return template_id in self._snapshot
