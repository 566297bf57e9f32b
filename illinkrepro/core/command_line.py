"""
Parsing of a recorded ILLink command line into typed arguments.

The recorded text looks like::

    /usr/share/dotnet/dotnet "/sdk/illink.dll" -a "obj/App.dll" ...
    -reference "/packs/System.Runtime.dll"
    -out "obj/linked"

The first line carries the launcher and the linker tool path; the remaining
tokens, across all lines, are grouped into flag groups and classified.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass

from ..utils.error_handling import MalformedInvocationError
from ..utils.logging import get_logger
from .arguments import (
    Argument,
    Descriptor,
    DotnetPathSection,
    LinkAttributes,
    Out,
    Reference,
    Root,
    SearchDirectory,
    ToolPathSection,
    Unknown,
)
from .tokenizer import join_tokens, split_line

__all__ = [
    "ILLinkCommandLine",
    "assemble_tokens",
    "classify_tokens",
    "group_tokens",
    "resolve_path",
]

log = get_logger(__name__)

_LINE_BREAK = re.compile(r"[\r\n]")

# Flags taking exactly one path token
_PATH_FLAGS: dict[str, type[Argument]] = {
    "-reference": Reference,
    "-out": Out,
    "-x": Descriptor,
    "--link-attributes": LinkAttributes,
    "-d": SearchDirectory,
}
_ROOT_FLAG = "-a"


def resolve_path(value: str, working_directory: str | os.PathLike) -> str:
    """Return an absolute, normalized path for a command-line path token."""
    return os.path.abspath(os.path.join(os.fspath(working_directory), value))


def _is_flag(token: str) -> bool:
    return token.startswith("-")


def assemble_tokens(command_line: str) -> tuple[str, str, list[str]]:
    """
    Join a possibly multi-line command line into one token stream.

    Returns:
        Tuple of (launcher path, raw tool path token, remaining tokens)

    Raises:
        MalformedInvocationError: If no launcher and tool path can be extracted
    """
    lines = _LINE_BREAK.split(command_line)

    first_index = next((i for i, line in enumerate(lines) if line.strip()), None)
    if first_index is None:
        raise MalformedInvocationError("Invalid ILLink command line: it is empty")

    first_line = lines[first_index]
    first_quote = first_line.find('"')
    if first_quote < 0:
        raise MalformedInvocationError(
            f"Invalid ILLink command line: no quoted tool path in '{first_line.strip()}'"
        )

    if first_line.lstrip().startswith('"'):
        first_tokens = split_line(first_line)
        if len(first_tokens) >= 2 and not _is_flag(first_tokens[1]):
            # Quoted launcher: "dotnet" "illink.dll" ...
            dotnet_path = first_tokens[0]
            remainder = first_tokens[1:]
            launcher_required = True
        else:
            # Tool started directly: "illink" -a ...
            dotnet_path = ""
            remainder = first_tokens
            launcher_required = False
    else:
        dotnet_path = first_line[:first_quote].strip()
        remainder = split_line(first_line[first_quote:])
        launcher_required = True

    if (launcher_required and not dotnet_path) or not remainder or not remainder[0]:
        raise MalformedInvocationError(
            f"Invalid ILLink command line: cannot extract launcher and tool path "
            f"from '{first_line.strip()}'"
        )

    tool_path, tokens = remainder[0], remainder[1:]
    for line in lines[first_index + 1 :]:
        tokens.extend(split_line(line))

    return dotnet_path, tool_path, tokens


def group_tokens(tokens: list[str]) -> list[list[str]]:
    """Group a flat token stream into flag groups.

    A flag token opens a group that absorbs every following non-flag token.
    Tokens seen before any flag form groups of their own.
    """
    groups: list[list[str]] = []
    current: list[str] | None = None
    for token in tokens:
        if _is_flag(token):
            current = [token]
            groups.append(current)
        elif current is not None:
            current.append(token)
        else:
            groups.append([token])
    return groups


def _classify_group(group: list[str], working_directory: str | os.PathLike) -> Argument:
    flag, values = group[0], group[1:]

    if flag == _ROOT_FLAG and 1 <= len(values) <= 2:
        mode = values[1] if len(values) == 2 else None
        return Root(resolve_path(values[0], working_directory), mode)

    argument_type = _PATH_FLAGS.get(flag)
    if argument_type is not None and len(values) == 1:
        return argument_type(resolve_path(values[0], working_directory))

    # Unrecognized flag, or a known flag with an unexpected token count
    return Unknown(join_tokens(group))


def classify_tokens(tokens: list[str], working_directory: str | os.PathLike) -> list[Argument]:
    """Classify a flat token stream into typed arguments, preserving order."""
    return [_classify_group(group, working_directory) for group in group_tokens(tokens)]


@dataclass(frozen=True)
class ILLinkCommandLine:
    """A parsed linker invocation."""

    dotnet_path: str
    tool_path: str
    arguments: tuple[Argument, ...]

    @classmethod
    def parse(cls, command_line: str, working_directory: str | os.PathLike) -> ILLinkCommandLine:
        """Parse recorded command-line text, resolving paths against working_directory.

        Raises:
            MalformedInvocationError: If the launcher or tool path is missing
        """
        dotnet_path, raw_tool_path, tokens = assemble_tokens(command_line)
        tool_path = resolve_path(raw_tool_path, working_directory)

        arguments: list[Argument] = [
            DotnetPathSection(dotnet_path),
            ToolPathSection(tool_path),
        ]
        arguments.extend(classify_tokens(tokens, working_directory))

        log.debug(
            f"Parsed ILLink command line with {len(arguments) - 2} arguments",
            extra={"tool_path": tool_path},
        )
        return cls(dotnet_path=dotnet_path, tool_path=tool_path, arguments=tuple(arguments))

    @property
    def linker_arguments(self) -> tuple[Argument, ...]:
        """Arguments passed to the linker, without the launcher and tool sections."""
        return tuple(
            a for a in self.arguments if not isinstance(a, (DotnetPathSection, ToolPathSection))
        )
