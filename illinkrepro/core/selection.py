"""
Selection of the linker invocation to reproduce.

Candidates are narrowed by optional project and target filters. When several
remain, the first one (in log order) that recorded an error wins, since a repro
is almost always wanted for a failing run; without failures the first candidate
is used.
"""

from __future__ import annotations

import os
from collections.abc import Sequence
from dataclasses import dataclass

from ..buildlog import LogTask
from ..utils.error_handling import NotFoundError
from ..utils.logging import get_logger

__all__ = ["TaskSelection", "select_task", "matches_project"]

log = get_logger(__name__)


@dataclass(frozen=True)
class TaskSelection:
    """The chosen task and, when a tie-break was needed, why it was chosen."""

    task: LogTask
    note: str | None = None


def matches_project(task: LogTask, project: str) -> bool:
    """True if the task's project is named ``project``, with or without extension."""
    name = task.project_name
    if name is None:
        return False
    return name == project or os.path.splitext(name)[0] == project


def select_task(
    candidates: Sequence[LogTask],
    project: str | None = None,
    target: str | None = None,
    task_name: str = "ILLink",
) -> TaskSelection:
    """
    Pick one linker invocation among the candidates.

    Args:
        candidates: Linker tasks in log order
        project: Optional project name filter
        target: Optional target name filter
        task_name: Task name used in messages

    Returns:
        TaskSelection with the chosen task

    Raises:
        NotFoundError: If no candidate exists or the filters exclude all of them
    """
    tasks = list(candidates)
    if not tasks:
        raise NotFoundError(
            f"No {task_name} task found in the log, make sure that trimming runs "
            "(and is not skipped by incremental build)."
        )

    if project:
        tasks = [t for t in tasks if matches_project(t, project)]
        if not tasks:
            raise NotFoundError(f"No {task_name} task in '{project}' project found.")

    if target:
        tasks = [t for t in tasks if t.target_name == target]
        if not tasks:
            raise NotFoundError(f"No {task_name} task in '{target}' target found.")

    if len(tasks) == 1:
        return TaskSelection(tasks[0])

    failed = [t for t in tasks if t.has_errors]
    if len(failed) > 1:
        note = f"Found more than one failing {task_name} task. Picking the first failing one."
        selected = failed[0]
    elif failed:
        note = f"Found failing {task_name} task, picking the failing one over any other."
        selected = failed[0]
    else:
        note = f"Found more than one {task_name} task and no failing one. Picking the first one."
        selected = tasks[0]

    log.info(
        note,
        extra={"candidates": len(tasks), "failed": len(failed), "project": selected.project_name},
    )
    return TaskSelection(selected, note)
