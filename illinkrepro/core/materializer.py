"""
Materialization of a parsed linker invocation into a self-contained repro.

Every file or directory the invocation references is copied into the repro's
input directory and the argument is rewritten to point at the copy through a
path relative to the repro root. The rewritten arguments are then written to a
response file next to the input directory::

    repro/
      input/App.dll
      input/Lib.dll
      input/Lib.1.dll      second, different Lib.dll
      linker.rsp
"""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path

from ..config.models import PathConfig
from ..utils.error_handling import safe_file_operation
from ..utils.file_ops import FileOperations
from ..utils.logging import get_logger
from .arguments import (
    Argument,
    Descriptor,
    LinkAttributes,
    Out,
    Reference,
    Root,
    SearchDirectory,
    render_response_file,
)
from .command_line import ILLinkCommandLine

__all__ = [
    "CopyRegistry",
    "FileSystemCopier",
    "ReproOutput",
    "create_repro",
    "materialize_arguments",
]

log = get_logger(__name__)


class FileSystemCopier:
    """Performs the actual copies for a CopyRegistry."""

    def is_file(self, path: str) -> bool:
        return os.path.isfile(path)

    def exists(self, path: str) -> bool:
        return os.path.lexists(path)

    def copy_file(self, source: str, destination: str) -> None:
        with safe_file_operation("copy file", source):
            FileOperations.copy_file(Path(source), Path(destination))

    def copy_directory(self, source: str, destination: str) -> None:
        with safe_file_operation("copy directory", source):
            FileOperations.copy_tree(Path(source), Path(destination))


class CopyRegistry:
    """
    Tracks what has been copied into the input directory during one run.

    A source path (made absolute) is copied at most once; later requests for the
    same source get the first copy's relative path back. Different sources with
    the same name are stored under ``<stem>.<n><ext>`` with n counting from 1.
    """

    def __init__(self, input_dir: Path, copier: FileSystemCopier | None = None):
        self.input_dir = Path(input_dir)
        self.copier = copier or FileSystemCopier()
        self._entries: dict[str, str] = {}
        self._taken: set[str] = set()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, path: str) -> bool:
        return os.path.abspath(path) in self._entries

    @property
    def entries(self) -> dict[str, str]:
        """Absolute source path -> relative destination path, in copy order."""
        return dict(self._entries)

    def copy_file(self, path: str) -> str:
        """Copy a file into the input directory and return its relative path."""
        source = os.path.abspath(path)
        existing = self._entries.get(source)
        if existing is not None:
            return existing

        stem, extension = os.path.splitext(os.path.basename(source))
        name = self._free_name(stem + extension, lambda i: f"{stem}.{i}{extension}")
        self.copier.copy_file(source, str(self.input_dir / name))
        return self._register(source, name)

    def copy_directory(self, path: str) -> str:
        """Recursively copy a directory into the input directory and return its relative path."""
        source = os.path.abspath(path)
        existing = self._entries.get(source)
        if existing is not None:
            return existing

        base = os.path.basename(source) or "root"
        name = self._free_name(base, lambda i: f"{base}.{i}")
        self.copier.copy_directory(source, str(self.input_dir / name))
        return self._register(source, name)

    def _free_name(self, name: str, variant: Callable[[int], str]) -> str:
        candidate = name
        index = 1
        while candidate in self._taken or self.copier.exists(str(self.input_dir / candidate)):
            candidate = variant(index)
            index += 1
        return candidate

    def _register(self, source: str, name: str) -> str:
        relative = os.path.join(self.input_dir.name, name)
        self._entries[source] = relative
        self._taken.add(name)
        log.debug(f"Copied {source} -> {relative}", extra={"source": source})
        return relative


def materialize_arguments(
    arguments: Iterable[Argument],
    registry: CopyRegistry,
    output_argument: str = "out",
) -> list[Argument]:
    """
    Copy the inputs of each argument through the registry and rewrite its path.

    Returns a new list; the given arguments are left untouched.
    """
    rewritten: list[Argument] = []
    for argument in arguments:
        if isinstance(argument, Reference):
            argument = dataclasses.replace(
                argument, assembly_path=registry.copy_file(argument.assembly_path)
            )
        elif isinstance(argument, Root):
            if registry.copier.is_file(argument.assembly_path):
                new_path = registry.copy_file(argument.assembly_path)
            else:
                # Not backed by a file: the linker resolves it by name
                new_path = os.path.basename(argument.assembly_path)
            argument = dataclasses.replace(argument, assembly_path=new_path)
        elif isinstance(argument, (Descriptor, LinkAttributes)):
            argument = dataclasses.replace(argument, path=registry.copy_file(argument.path))
        elif isinstance(argument, SearchDirectory):
            argument = dataclasses.replace(argument, path=registry.copy_directory(argument.path))
        elif isinstance(argument, Out):
            argument = Out(output_argument)
        rewritten.append(argument)
    return rewritten


@dataclass(frozen=True)
class ReproOutput:
    root: Path
    input_dir: Path
    response_file: Path
    arguments: tuple[Argument, ...] = ()
    copied: dict[str, str] = field(default_factory=dict)


def create_repro(
    command_line: ILLinkCommandLine,
    output_dir: Path,
    *,
    paths: PathConfig | None = None,
    copier: FileSystemCopier | None = None,
) -> ReproOutput:
    """
    Materialize a parsed invocation under ``output_dir``.

    The output directory is expected to be fresh; removing an older repro is up
    to the caller. A failing copy aborts the run and leaves whatever was already
    written in place.

    Raises:
        FileOperationError: If a copy or the response-file write fails
    """
    paths = paths or PathConfig()
    output_dir = Path(output_dir)
    input_dir = output_dir / paths.input_dir

    with safe_file_operation("create input directory", input_dir):
        FileOperations.ensure_directory(input_dir)

    registry = CopyRegistry(input_dir, copier)
    arguments = materialize_arguments(command_line.arguments, registry, paths.output_argument)

    response_file = output_dir / paths.response_file
    with safe_file_operation("write response file", response_file):
        FileOperations.atomic_write(response_file, render_response_file(arguments))

    log.info(
        f"Wrote {response_file} with {len(registry)} copied inputs",
        extra={"response_file": str(response_file)},
    )
    return ReproOutput(
        root=output_dir,
        input_dir=input_dir,
        response_file=response_file,
        arguments=tuple(arguments),
        copied=registry.entries,
    )
