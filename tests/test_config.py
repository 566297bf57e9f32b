"""Tests for environment-driven configuration."""

import pytest

from illinkrepro.config import ReproConfig, get_config, reset_config
from illinkrepro.config.exceptions import FieldValidationError
from illinkrepro.config.models import PathConfig
from illinkrepro.create import CreateConfig
from illinkrepro.utils.error_handling import UsageError


class TestDefaults:
    def test_default_layout(self):
        config = ReproConfig()
        assert config.paths.default_output_dir == "repro"
        assert config.paths.input_dir == "input"
        assert config.paths.response_file == "linker.rsp"
        assert config.paths.output_argument == "out"
        assert config.task.task_name == "ILLink"
        assert (config.exit_codes.success, config.exit_codes.error) == (0, 1)
        assert (config.exit_codes.invalid_args, config.exit_codes.malformed) == (2, 3)


class TestFromEnv:
    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("ILLINKREPRO_INPUT_DIR", "inputs")
        monkeypatch.setenv("ILLINKREPRO_RESPONSE_FILE", "repro.rsp")
        monkeypatch.setenv("ILLINKREPRO_TASK_NAME", "Trimmer")

        config = get_config()

        assert config.paths.input_dir == "inputs"
        assert config.paths.response_file == "repro.rsp"
        assert config.task.task_name == "Trimmer"

    def test_global_instance_is_cached_until_reset(self, monkeypatch):
        first = get_config()
        assert get_config() is first
        reset_config()
        assert get_config() is not first

    def test_invalid_environment_fails_fast(self, monkeypatch):
        monkeypatch.setenv("ILLINKREPRO_INPUT_DIR", "a/b")
        with pytest.raises(FieldValidationError) as exc_info:
            get_config()
        assert exc_info.value.field == "input_dir"


class TestValidate:
    @pytest.mark.parametrize("field", ["default_output_dir", "input_dir", "response_file", "output_argument"])
    def test_empty_names_are_rejected(self, field):
        config = ReproConfig(paths=PathConfig(**{field: " "}))
        with pytest.raises(FieldValidationError, match="must not be empty"):
            config.validate()

    def test_separator_in_response_file_is_rejected(self):
        config = ReproConfig(paths=PathConfig(response_file="sub\\linker.rsp"))
        with pytest.raises(FieldValidationError, match="plain name"):
            config.validate()

    def test_empty_task_name_is_rejected(self):
        config = ReproConfig()
        config.task.task_name = ""
        with pytest.raises(FieldValidationError):
            config.validate()


class TestCreateConfig:
    def test_blank_filters_mean_no_filter(self, tmp_path):
        config = CreateConfig(tmp_path / "build.xml", project=" ", target="", task_name="\t")
        assert (config.project, config.target, config.task_name) == (None, None, None)

    def test_filters_are_kept(self, tmp_path):
        config = CreateConfig(tmp_path / "build.xml", project="App", target="ILLink")
        assert (config.project, config.target) == ("App", "ILLink")

    def test_missing_log_is_a_usage_error(self, tmp_path):
        with pytest.raises(UsageError, match="doesn't exist"):
            CreateConfig(tmp_path / "missing.xml").validate()
