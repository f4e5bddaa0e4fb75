"""
Task ranking and conversion of recommended features into tasks.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

from pm_autopilot.core.constants import EFFECT_LABELS, SCORE_MAX, SCORE_MIN, TaskPriority
from pm_autopilot.core.logging import get_logger
from pm_autopilot.domain.task import TaskCandidate, compute_priority_score

logger = get_logger(__name__)


def rank_tasks(tasks: Sequence[TaskCandidate]) -> list[TaskCandidate]:
    """Order tasks by priority score, lowest first; ties keep input order."""
    return sorted(tasks, key=lambda task: task.priority_score)


def tier_for_rank(index: int) -> TaskPriority:
    """Priority tier for a 0-based rank: two high, two medium, then low."""
    if index < 2:
        return TaskPriority.HIGH
    if index < 4:
        return TaskPriority.MEDIUM
    return TaskPriority.LOW


def impact_from_cost(development_cost: Optional[int]) -> int:
    """Cheaper work scores higher impact; 5 when the cost is unknown."""
    if development_cost is None:
        return 5
    return (4 - development_cost) * 3


def _score(value: Any) -> Optional[int]:
    """Coerce a model-provided 1-3 score, dropping anything out of range."""
    try:
        score = int(value)
    except (TypeError, ValueError):
        return None
    return score if SCORE_MIN <= score <= SCORE_MAX else None


def _count(value: Any) -> Optional[int]:
    try:
        count = int(value)
    except (TypeError, ValueError):
        return None
    return count if count >= 0 else None


def _feature_priority(feature: dict[str, Any]) -> int:
    return compute_priority_score(
        _score(feature.get("development_cost")), _score(feature.get("effect_score"))
    )


def describe_feature(feature: dict[str, Any]) -> str:
    """Feature description followed by its analysis metrics."""
    cost = _score(feature.get("development_cost"))
    effect = _score(feature.get("effect_score"))
    lines = [
        str(feature.get("description") or "").strip(),
        "",
        "[Analysis metrics]",
        f"- Development cost: {cost if cost is not None else 'N/A'} MM",
        f"- Effect: {EFFECT_LABELS.get(effect, 'N/A')}",
        f"- Priority score: {compute_priority_score(cost, effect)}",
        f"- Related category: {feature.get('category') or 'N/A'}",
    ]
    return "\n".join(lines).strip()


def feature_task_fields(features: Sequence[Any], limit: int) -> list[dict[str, Any]]:
    """
    Turn recommended features into task candidate fields.

    Features are ranked by cost times effect (lowest first, stable), the best
    ``limit`` are kept and tiers assigned by rank.

    Returns:
        Keyword fields for one ``TaskCandidate`` per kept feature, in rank order
    """
    usable = [f for f in features if isinstance(f, dict)]
    if len(usable) != len(features):
        logger.warning("Skipped malformed recommended features", skipped=len(features) - len(usable))

    ranked = sorted(usable, key=_feature_priority)[:limit]

    tasks = []
    for index, feature in enumerate(ranked):
        cost = _score(feature.get("development_cost"))
        related = _count(feature.get("related_feedback_count"))
        tasks.append(
            dict(
                title=str(feature.get("title") or "Feature improvement").strip(),
                description=describe_feature(feature),
                development_cost=cost,
                effect_score=_score(feature.get("effect_score")),
                impact_score=impact_from_cost(cost),
                frequency_score=related or 1,
                priority=tier_for_rank(index),
            )
        )
    return tasks
