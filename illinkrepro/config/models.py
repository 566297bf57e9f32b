"""Configuration models for illinkrepro.

This module provides type-safe configuration with environment variable support
and validation. Defaults reproduce the layout the linker repro has always used
(``repro/input`` plus ``linker.rsp``).
"""

import os
from dataclasses import dataclass, field

from .exceptions import FieldValidationError


@dataclass
class PathConfig:
    """Names of the directories and files making up a repro."""

    default_output_dir: str = "repro"
    input_dir: str = "input"
    response_file: str = "linker.rsp"
    output_argument: str = "out"  # literal written for every -out argument

    @classmethod
    def from_env(cls) -> "PathConfig":
        """Create PathConfig from environment variables."""
        return cls(
            default_output_dir=os.getenv("ILLINKREPRO_DEFAULT_OUTPUT_DIR", "repro"),
            input_dir=os.getenv("ILLINKREPRO_INPUT_DIR", "input"),
            response_file=os.getenv("ILLINKREPRO_RESPONSE_FILE", "linker.rsp"),
            output_argument=os.getenv("ILLINKREPRO_OUTPUT_ARGUMENT", "out"),
        )


@dataclass
class TaskConfig:
    """How the linker task is identified inside the build log."""

    task_name: str = "ILLink"

    @classmethod
    def from_env(cls) -> "TaskConfig":
        """Create TaskConfig from environment variables."""
        return cls(task_name=os.getenv("ILLINKREPRO_TASK_NAME", "ILLink"))


@dataclass
class ExitCodeConfig:
    """Exit codes for different scenarios."""

    success: int = 0
    error: int = 1
    invalid_args: int = 2
    malformed: int = 3

    @classmethod
    def from_env(cls) -> "ExitCodeConfig":
        """Create ExitCodeConfig from environment variables."""
        return cls(
            success=int(os.getenv("ILLINKREPRO_EXIT_CODE_SUCCESS", "0")),
            error=int(os.getenv("ILLINKREPRO_EXIT_CODE_ERROR", "1")),
            invalid_args=int(os.getenv("ILLINKREPRO_EXIT_CODE_INVALID_ARGS", "2")),
            malformed=int(os.getenv("ILLINKREPRO_EXIT_CODE_MALFORMED", "3")),
        )


@dataclass
class ReproConfig:
    """Main configuration container for illinkrepro."""

    paths: PathConfig = field(default_factory=PathConfig)
    task: TaskConfig = field(default_factory=TaskConfig)
    exit_codes: ExitCodeConfig = field(default_factory=ExitCodeConfig)

    @classmethod
    def from_env(cls) -> "ReproConfig":
        """Create configuration from environment variables."""
        return cls(
            paths=PathConfig.from_env(),
            task=TaskConfig.from_env(),
            exit_codes=ExitCodeConfig.from_env(),
        )

    def validate(self) -> None:
        """Validate configuration values and fail fast if invalid."""
        for name in ("default_output_dir", "input_dir", "response_file", "output_argument"):
            if not getattr(self.paths, name).strip():
                raise FieldValidationError(f"{name} must not be empty", field=name)

        for name in ("input_dir", "response_file"):
            value = getattr(self.paths, name)
            if "/" in value or "\\" in value:
                raise FieldValidationError(
                    f"{name} must be a plain name, got '{value}'", field=name
                )

        if not self.task.task_name.strip():
            raise FieldValidationError("task_name must not be empty", field="task_name")


# Global configuration instance
_config_instance: ReproConfig | None = None


def get_config() -> ReproConfig:
    """Get the global configuration instance, creating it if needed."""
    global _config_instance
    if _config_instance is None:
        _config_instance = ReproConfig.from_env()
        _config_instance.validate()
    return _config_instance


def reset_config() -> None:
    """Reset the global configuration instance (mainly for testing)."""
    global _config_instance
    _config_instance = None
