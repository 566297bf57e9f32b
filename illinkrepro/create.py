"""Implementation of the ``create`` and ``list`` commands."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path

from .buildlog import read_build_log
from .config.models import get_config
from .core.command_line import ILLinkCommandLine
from .core.materializer import create_repro
from .core.selection import select_task
from .utils.decorators import log_operation, time_execution
from .utils.error_handling import NotFoundError, UsageError, safe_file_operation
from .utils.file_ops import FileOperations
from .utils.logging import get_logger

log = get_logger(__name__)


@dataclass
class CreateConfig:
    """Options of the create command."""

    log_path: Path
    out: Path | None = None
    force: bool = False
    project: str | None = None
    target: str | None = None
    task_name: str | None = None

    def __post_init__(self) -> None:
        # Blank filters mean "no filter"
        for name in ("project", "target", "task_name"):
            value = getattr(self, name)
            if value is not None and not value.strip():
                setattr(self, name, None)

    def validate(self) -> None:
        """Validate create options and raise descriptive errors."""
        if not self.log_path.exists():
            raise UsageError(f"Build log {self.log_path} doesn't exist.")

    def resolve_output(self) -> Path:
        """Output directory: --out, else the configured default under the current directory."""
        if self.out is not None:
            return self.out.resolve()
        return (Path.cwd() / get_config().paths.default_output_dir).resolve()


@time_execution(log_threshold=0.5)
@log_operation("repro creation")
def cmd_create(config: CreateConfig) -> int:
    """Create a repro for the selected linker invocation of a build log.

    Returns the success exit code, or the error exit code when no matching
    invocation exists. Usage, malformed-invocation and filesystem errors are
    raised.
    """
    settings = get_config()
    config.validate()
    task_name = config.task_name or settings.task.task_name

    out = config.resolve_output()
    if out.exists() and not config.force:
        raise UsageError(f"Output path {out} already exists. Use --force to overwrite.")

    build_log = read_build_log(config.log_path)
    try:
        selection = select_task(
            build_log.find_tasks(task_name),
            project=config.project,
            target=config.target,
            task_name=task_name,
        )
    except NotFoundError as e:
        print(e.message, file=sys.stderr)
        return settings.exit_codes.error

    if selection.note:
        print(selection.note)

    task = selection.task
    print(f"Creating repro for {task_name} task from project {task.project_name}")
    command_line = ILLinkCommandLine.parse(task.command_line, build_log.working_directory(task))

    if out.exists():
        log.info(f"Removing existing output {out}")
        with safe_file_operation("remove output directory", out):
            FileOperations.remove_tree(out)

    create_repro(command_line, out, paths=settings.paths)
    print(out)
    return settings.exit_codes.success


def cmd_list(log_path: Path, task_name: str | None = None) -> int:
    """Print the linker invocations of a build log, in log order."""
    settings = get_config()
    task_name = task_name or settings.task.task_name
    if not log_path.exists():
        raise UsageError(f"Build log {log_path} doesn't exist.")

    tasks = read_build_log(log_path).find_tasks(task_name)
    if not tasks:
        print(f"No {task_name} task found in the log.", file=sys.stderr)
        return settings.exit_codes.error

    for index, task in enumerate(tasks):
        status = "  [failed]" if task.has_errors else ""
        print(f"{index:>3}  {task.project_name or '-'}  {task.target_name or '-'}{status}")
    return settings.exit_codes.success
