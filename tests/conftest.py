"""Shared test fixtures and configuration."""

import logging
from pathlib import Path
from xml.sax.saxutils import quoteattr

import pytest

from illinkrepro.config.models import reset_config
from illinkrepro.utils.logging import LOGGER_NAME


@pytest.fixture(autouse=True)
def fresh_config(monkeypatch):
    """Isolate tests from ILLINKREPRO_* settings of the calling environment."""
    for var in [
        "ILLINKREPRO_DEFAULT_OUTPUT_DIR",
        "ILLINKREPRO_INPUT_DIR",
        "ILLINKREPRO_RESPONSE_FILE",
        "ILLINKREPRO_OUTPUT_ARGUMENT",
        "ILLINKREPRO_TASK_NAME",
        "ILLINKREPRO_LOG_FORMAT",
    ]:
        monkeypatch.delenv(var, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture(autouse=True)
def restore_logging():
    """Drop handlers that main() bound to per-test capture streams."""
    logger = logging.getLogger(LOGGER_NAME)
    handlers, level = list(logger.handlers), logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)


@pytest.fixture
def isolated_environment(tmp_path, monkeypatch):
    """Run the test from an empty working directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _task_xml(task: dict) -> str:
    command_line = quoteattr(task["command_line"])
    errors = '<Folder Name="Errors"><Error Text="ILLink failed" /></Folder>' if task.get("failed") else ""
    return (
        f'<Target Name={quoteattr(task.get("target", "ILLink"))}>'
        f'<Task Name={quoteattr(task.get("name", "ILLink"))} CommandLineArguments={command_line}>'
        f"{errors}</Task></Target>"
    )


def render_build_log(projects: list[dict]) -> str:
    """Render a minimal structured-log XML export.

    Each project is {"name", "file", "tasks": [{"command_line", "target", "name", "failed"}]}.
    """
    parts = ['<?xml version="1.0" encoding="utf-8"?>', "<Build Succeeded=\"false\">"]
    for project in projects:
        parts.append(
            f'<Project Name={quoteattr(project["name"])} ProjectFile={quoteattr(project["file"])}>'
        )
        parts.extend(_task_xml(task) for task in project.get("tasks", []))
        parts.append("</Project>")
    parts.append("</Build>")
    return "\n".join(parts)


@pytest.fixture
def write_build_log(tmp_path):
    """Write a build log XML file and return its path."""

    def _write(projects: list[dict], name: str = "build.xml") -> Path:
        path = tmp_path / name
        path.write_text(render_build_log(projects), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def app_tree(tmp_path):
    """A small source tree with the files a typical ILLink run references."""
    src = tmp_path / "src"
    ref = tmp_path / "ref"
    src.mkdir()
    ref.mkdir()
    (src / "App.dll").write_bytes(b"app")
    (src / "App.xml").write_text("<linker />", encoding="utf-8")
    (ref / "Lib.dll").write_bytes(b"lib")
    return tmp_path
