"""Tests for parsing recorded ILLink command lines."""

import os

import pytest

from illinkrepro.core.arguments import (
    Descriptor,
    DotnetPathSection,
    LinkAttributes,
    Out,
    Reference,
    Root,
    SearchDirectory,
    ToolPathSection,
    Unknown,
    render_response_file,
)
from illinkrepro.core.command_line import (
    ILLinkCommandLine,
    assemble_tokens,
    classify_tokens,
    group_tokens,
    resolve_path,
)
from illinkrepro.utils.error_handling import MalformedInvocationError

WORKDIR = "/work/App"

MSBUILD_COMMAND_LINE = (
    '/usr/share/dotnet/dotnet "/sdk/illink.dll" -a "obj/App.dll" EntryPoint\n'
    '-reference "/packs/System.Runtime.dll"\r\n'
    '-reference "obj/Lib.dll"\n'
    '-out "obj/linked"\n'
    '-x "ILLink.Descriptors.xml"\n'
    '--link-attributes "/sdk/ILLink.LinkAttributes.xml"\n'
    '-d "/packs/ref"\n'
    "--trim-mode link\n"
    "--singlewarn\n"
)


class TestResolvePath:
    def test_relative_path_is_joined_with_working_directory(self):
        assert resolve_path("obj/App.dll", WORKDIR) == os.path.abspath("/work/App/obj/App.dll")

    def test_absolute_path_is_normalized(self):
        assert resolve_path("/a/b/../c.dll", WORKDIR) == os.path.abspath("/a/c.dll")


class TestAssembleTokens:
    """Test joining multi-line command lines into one token stream."""

    def test_unquoted_launcher_before_first_quote(self):
        dotnet, tool, tokens = assemble_tokens('/usr/bin/dotnet "/sdk/illink.dll" -a x.dll')
        assert dotnet == "/usr/bin/dotnet"
        assert tool == "/sdk/illink.dll"
        assert tokens == ["-a", "x.dll"]

    def test_quoted_launcher(self):
        dotnet, tool, tokens = assemble_tokens('"/usr/bin/dotnet" "/tools/illink" -a "/src/App.dll"')
        assert dotnet == "/usr/bin/dotnet"
        assert tool == "/tools/illink"
        assert tokens == ["-a", "/src/App.dll"]

    def test_quoted_tool_without_launcher(self):
        dotnet, tool, tokens = assemble_tokens('"/tools/illink" -a "/src/App.dll"')
        assert dotnet == ""
        assert tool == "/tools/illink"
        assert tokens == ["-a", "/src/App.dll"]

    def test_quoted_tool_alone(self):
        assert assemble_tokens('"/tools/illink"') == ("", "/tools/illink", [])

    def test_launcher_with_spaces(self):
        dotnet, tool, _ = assemble_tokens('C:/Program Files/dotnet/dotnet.exe "C:/sdk/illink.dll"')
        assert dotnet == "C:/Program Files/dotnet/dotnet.exe"
        assert tool == "C:/sdk/illink.dll"

    def test_tokens_of_all_lines_are_concatenated_in_order(self):
        _, _, tokens = assemble_tokens('dotnet "illink.dll" -a a.dll\r\n-x d.xml\r-d dir\n\n')
        assert tokens == ["-a", "a.dll", "-x", "d.xml", "-d", "dir"]

    def test_leading_blank_lines_are_skipped(self):
        dotnet, tool, tokens = assemble_tokens('\n  \r\ndotnet "illink.dll"\n-out o')
        assert (dotnet, tool, tokens) == ("dotnet", "illink.dll", ["-out", "o"])

    @pytest.mark.parametrize(
        "command_line",
        [
            "",
            "\n\r\n   ",
            "dotnet illink.dll -a App.dll",
            '""',
            'dotnet ""',
            '"" "illink.dll"',
        ],
    )
    def test_malformed_command_lines(self, command_line):
        with pytest.raises(MalformedInvocationError, match="Invalid ILLink command line"):
            assemble_tokens(command_line)


class TestGroupTokens:
    """Test grouping tokens into flag groups."""

    def test_flag_absorbs_following_values(self):
        assert group_tokens(["-a", "x.dll", "mode", "-out", "o"]) == [
            ["-a", "x.dll", "mode"],
            ["-out", "o"],
        ]

    def test_tokens_before_first_flag_are_singletons(self):
        assert group_tokens(["stray", "other", "-x", "a"]) == [["stray"], ["other"], ["-x", "a"]]

    def test_grouping_is_lossless(self):
        tokens = ["a", "-b", "c", "d", "--e", "-f", "g"]
        groups = group_tokens(tokens)
        assert [t for group in groups for t in group] == tokens


class TestClassifyTokens:
    """Test mapping flag groups to argument variants."""

    def test_known_flags(self):
        arguments = classify_tokens(
            [
                "-a", "App.dll", "visible",
                "-reference", "Lib.dll",
                "-out", "out",
                "-x", "d.xml",
                "--link-attributes", "la.xml",
                "-d", "/dir",
            ],
            WORKDIR,
        )  # fmt: skip
        assert arguments == [
            Root(resolve_path("App.dll", WORKDIR), "visible"),
            Reference(resolve_path("Lib.dll", WORKDIR)),
            Out(resolve_path("out", WORKDIR)),
            Descriptor(resolve_path("d.xml", WORKDIR)),
            LinkAttributes(resolve_path("la.xml", WORKDIR)),
            SearchDirectory(os.path.abspath("/dir")),
        ]

    def test_root_without_mode(self):
        assert classify_tokens(["-a", "/x/App.dll"], WORKDIR) == [Root(os.path.abspath("/x/App.dll"))]

    def test_root_with_explicit_empty_mode(self):
        (root,) = classify_tokens(["-a", "/x/App.dll", ""], WORKDIR)
        assert root.mode == ""
        assert root != Root(os.path.abspath("/x/App.dll"))

    def test_unknown_flag_group_is_kept_verbatim(self):
        arguments = classify_tokens(["--feature", "System.Foo", "false", "--singlewarn"], WORKDIR)
        assert arguments == [Unknown("--feature System.Foo false"), Unknown("--singlewarn")]

    def test_unknown_group_requotes_tokens_with_spaces(self):
        (argument,) = classify_tokens(["--custom-data", "Name=a value"], WORKDIR)
        assert argument == Unknown('--custom-data "Name=a value"')

    def test_known_flag_without_value_is_unknown(self):
        assert classify_tokens(["-reference"], WORKDIR) == [Unknown("-reference")]

    def test_known_flag_with_extra_values_is_unknown(self):
        assert classify_tokens(["-out", "a", "b"], WORKDIR) == [Unknown("-out a b")]

    def test_flags_are_case_sensitive(self):
        assert classify_tokens(["-A", "x"], WORKDIR) == [Unknown("-A x")]


class TestILLinkCommandLine:
    """Test parsing complete invocations."""

    def test_parse_msbuild_style_command_line(self):
        command_line = ILLinkCommandLine.parse(MSBUILD_COMMAND_LINE, WORKDIR)

        assert command_line.dotnet_path == "/usr/share/dotnet/dotnet"
        assert command_line.tool_path == os.path.abspath("/sdk/illink.dll")
        assert command_line.arguments[:2] == (
            DotnetPathSection("/usr/share/dotnet/dotnet"),
            ToolPathSection(os.path.abspath("/sdk/illink.dll")),
        )
        assert command_line.linker_arguments == (
            Root(resolve_path("obj/App.dll", WORKDIR), "EntryPoint"),
            Reference(os.path.abspath("/packs/System.Runtime.dll")),
            Reference(resolve_path("obj/Lib.dll", WORKDIR)),
            Out(resolve_path("obj/linked", WORKDIR)),
            Descriptor(resolve_path("ILLink.Descriptors.xml", WORKDIR)),
            LinkAttributes(os.path.abspath("/sdk/ILLink.LinkAttributes.xml")),
            SearchDirectory(os.path.abspath("/packs/ref")),
            Unknown("--trim-mode link"),
            Unknown("--singlewarn"),
        )

    def test_quoted_tool_without_launcher_keeps_root_assembly(self):
        command_line = ILLinkCommandLine.parse('"/tools/illink" -a "/src/App.dll"', WORKDIR)

        assert command_line.dotnet_path == ""
        assert command_line.tool_path == os.path.abspath("/tools/illink")
        assert command_line.linker_arguments == (Root(os.path.abspath("/src/App.dll")),)

    def test_relative_tool_path_is_resolved(self):
        command_line = ILLinkCommandLine.parse('dotnet "tools/illink.dll"', WORKDIR)
        assert command_line.tool_path == resolve_path("tools/illink.dll", WORKDIR)
        assert command_line.linker_arguments == ()

    def test_reserialized_arguments_parse_to_the_same_canonical_form(self):
        first = ILLinkCommandLine.parse(MSBUILD_COMMAND_LINE, WORKDIR)
        text = 'dotnet "/sdk/illink.dll"\n' + render_response_file(first.linker_arguments)

        # A different working directory must not matter once paths are absolute
        second = ILLinkCommandLine.parse(text, "/elsewhere")

        assert second.linker_arguments == first.linker_arguments

    def test_malformed_command_line_raises(self):
        with pytest.raises(MalformedInvocationError):
            ILLinkCommandLine.parse("-a App.dll", WORKDIR)
