"""
Status transition rules.
"""

from __future__ import annotations

from enum import Enum
from typing import Sequence, TypeVar

from pm_autopilot.core.constants import TASK_STATUS_ORDER, TASK_TERMINAL_STATUSES, TaskStatus
from pm_autopilot.core.exceptions import InvalidStatusTransitionError

S = TypeVar("S", bound=Enum)


def check_forward_transition(
    resource_type: str,
    order: Sequence[S],
    current: S,
    requested: S,
) -> None:
    """
    Allow a status to stay put or move to any later stage.

    Raises:
        InvalidStatusTransitionError: If the requested status is earlier
    """
    if order.index(requested) < order.index(current):
        raise InvalidStatusTransitionError(resource_type, current.value, requested.value)


def check_task_transition(current: TaskStatus, requested: TaskStatus) -> None:
    """
    Task workflow: forward through the pipeline, or out to rejected from any
    open status. Completed and rejected tasks are final.

    Raises:
        InvalidStatusTransitionError: If the move is not allowed
    """
    if current == requested:
        return
    if current in TASK_TERMINAL_STATUSES:
        raise InvalidStatusTransitionError("TaskCandidate", current.value, requested.value)
    if requested == TaskStatus.REJECTED:
        return
    check_forward_transition("TaskCandidate", TASK_STATUS_ORDER, current, requested)
