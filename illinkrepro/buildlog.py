"""
Read-only view of a structured build log.

Only the shape needed to find linker invocations is modelled: projects own
targets, targets own tasks, and a task carries its command line and whether it
recorded errors. ``read_build_log`` loads the XML export of a structured build
log (as saved by the MSBuild Structured Log Viewer).
"""

from __future__ import annotations

import os
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path

from .utils.error_handling import UsageError, safe_file_operation
from .utils.logging import get_logger

__all__ = ["BuildLog", "LogProject", "LogTarget", "LogTask", "parse_build_log", "read_build_log"]

log = get_logger(__name__)


@dataclass(frozen=True)
class LogProject:
    name: str
    project_file: str | None = None

    @property
    def directory(self) -> str | None:
        """Directory of the project file, the working directory of its tasks."""
        if not self.project_file:
            return None
        return os.path.dirname(self.project_file)


@dataclass(frozen=True)
class LogTarget:
    name: str
    project: LogProject | None = None


@dataclass(frozen=True)
class LogTask:
    name: str
    command_line: str
    target: LogTarget | None = None
    has_errors: bool = False

    @property
    def project(self) -> LogProject | None:
        return self.target.project if self.target else None

    @property
    def project_name(self) -> str | None:
        return self.project.name if self.project else None

    @property
    def target_name(self) -> str | None:
        return self.target.name if self.target else None


@dataclass
class BuildLog:
    """All tasks of a build, in log order."""

    tasks: list[LogTask] = field(default_factory=list)
    path: Path | None = None

    def find_tasks(self, name: str) -> list[LogTask]:
        return [task for task in self.tasks if task.name == name]

    def working_directory(self, task: LogTask) -> str:
        """Directory the task's relative paths are resolved against."""
        project = task.project
        if project and project.directory:
            return project.directory
        if self.path is not None:
            return str(self.path.resolve().parent)
        return os.getcwd()


def _command_line_of(element: ET.Element) -> str:
    value = element.get("CommandLineArguments")
    if value is not None:
        return value
    child = element.find("CommandLineArguments")
    if child is not None and child.text:
        return child.text
    return ""


def _has_errors(element: ET.Element) -> bool:
    for child in element:
        if child.tag == "Error" or child.get("Name") == "Errors":
            return True
    return False


def _collect_tasks(
    element: ET.Element,
    project: LogProject | None,
    target: LogTarget | None,
    tasks: list[LogTask],
) -> None:
    for child in element:
        tag = child.tag
        if tag == "Project":
            child_project = LogProject(
                name=child.get("Name") or os.path.basename(child.get("ProjectFile") or ""),
                project_file=child.get("ProjectFile"),
            )
            _collect_tasks(child, child_project, None, tasks)
        elif tag == "Target":
            _collect_tasks(child, project, LogTarget(child.get("Name", ""), project), tasks)
        elif tag == "Task":
            tasks.append(
                LogTask(
                    name=child.get("Name", ""),
                    command_line=_command_line_of(child),
                    target=target,
                    has_errors=_has_errors(child),
                )
            )
            # Projects built through the MSBuild task are nested under it
            _collect_tasks(child, project, target, tasks)
        else:
            _collect_tasks(child, project, target, tasks)


def parse_build_log(text: str | bytes, path: Path | None = None) -> BuildLog:
    """Build a BuildLog from the XML text of a structured log export."""
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise UsageError(f"Build log {path or '<text>'} is not valid XML: {e}") from e

    tasks: list[LogTask] = []
    _collect_tasks(root, None, None, tasks)
    log.debug(f"Read {len(tasks)} tasks from build log", extra={"path": str(path)})
    return BuildLog(tasks=tasks, path=path)


def read_build_log(path: Path) -> BuildLog:
    """Read the XML export of a structured build log.

    Raises:
        UsageError: If the file is missing, binary or not valid XML
        FileOperationError: If the file cannot be read
    """
    if not path.is_file():
        raise UsageError(f"Build log {path} doesn't exist.")
    if path.suffix.lower() == ".binlog":
        raise UsageError(
            f"Build log {path} is a binary log; save it as XML with the "
            "structured log viewer and pass the .xml file."
        )

    with safe_file_operation("read build log", path):
        text = path.read_bytes()
    return parse_build_log(text, path)
