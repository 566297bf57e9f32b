"""
Typed ILLink command-line arguments.

Every flag group of a linker invocation maps to exactly one of the classes
below. The set is closed: supporting a new flag means adding a class here and a
case to the classifier in ``command_line``. Instances are immutable; rewriting
an argument produces a new instance via ``dataclasses.replace``.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .tokenizer import quote_token

__all__ = [
    "Argument",
    "DotnetPathSection",
    "ToolPathSection",
    "Root",
    "Reference",
    "Out",
    "Descriptor",
    "LinkAttributes",
    "SearchDirectory",
    "Unknown",
    "render_response_file",
]


@dataclass(frozen=True)
class Argument:
    """Base class of all argument variants."""

    def render(self) -> str:
        """Return the argument in its canonical command-line syntax."""
        raise NotImplementedError


@dataclass(frozen=True)
class DotnetPathSection(Argument):
    """The launcher executable that started the linker."""

    path: str

    def render(self) -> str:
        return quote_token(self.path)


@dataclass(frozen=True)
class ToolPathSection(Argument):
    """The linker tool itself."""

    path: str

    def render(self) -> str:
        return quote_token(self.path)


@dataclass(frozen=True)
class Root(Argument):
    """``-a``: an assembly kept as a trimming entry point.

    ``mode`` distinguishes a missing mode (None) from an explicitly empty one;
    neither is rendered.
    """

    assembly_path: str
    mode: str | None = None

    def render(self) -> str:
        if self.mode:
            return f"-a {quote_token(self.assembly_path)} {quote_token(self.mode)}"
        return f"-a {quote_token(self.assembly_path)}"


@dataclass(frozen=True)
class Reference(Argument):
    """``-reference``: an assembly supplied for resolution only."""

    assembly_path: str

    def render(self) -> str:
        return f"-reference {quote_token(self.assembly_path)}"


@dataclass(frozen=True)
class Out(Argument):
    """``-out``: the output directory."""

    path: str

    def render(self) -> str:
        return f"-out {quote_token(self.path)}"


@dataclass(frozen=True)
class Descriptor(Argument):
    """``-x``: an XML root descriptor."""

    path: str

    def render(self) -> str:
        return f"-x {quote_token(self.path)}"


@dataclass(frozen=True)
class LinkAttributes(Argument):
    """``--link-attributes``: an XML link attributes file."""

    path: str

    def render(self) -> str:
        return f"--link-attributes {quote_token(self.path)}"


@dataclass(frozen=True)
class SearchDirectory(Argument):
    """``-d``: a directory searched when resolving assemblies."""

    path: str

    def render(self) -> str:
        return f"-d {quote_token(self.path)}"


@dataclass(frozen=True)
class Unknown(Argument):
    """Any other flag group, carried through verbatim."""

    raw_text: str

    def render(self) -> str:
        return self.raw_text


def render_response_file(arguments: Iterable[Argument]) -> str:
    """Render arguments as response-file text, one argument per line.

    The launcher and tool sections describe how the linker was started and are
    not linker arguments, so they are left out.
    """
    lines = [
        argument.render()
        for argument in arguments
        if not isinstance(argument, (DotnetPathSection, ToolPathSection))
    ]
    return "".join(line + "\n" for line in lines)
