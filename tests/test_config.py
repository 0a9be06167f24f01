"""
tests/test_config.py — stacks.yml loading tests.

File discovery, format validation, defaults.
"""

import os
import sys
import yaml
import pytest
import tempfile
import shutil
from pathlib import Path

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from stacks.config.loader import (
    Config, find_stacks_file, load_config, parse_config_dict, DEFAULT_COMMAND,
)
from stacks.errors import ConfigError


def _make_workspace(files: dict[str, str | dict]) -> str:
    """Create a temporary directory with the given files."""
    tmpdir = tempfile.mkdtemp()
    for name, content in files.items():
        path = os.path.join(tmpdir, name)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w") as f:
            if isinstance(content, dict):
                yaml.dump(content, f)
            else:
                f.write(content)
    return tmpdir


BASIC = """
stacks:
  networks: {}
  web:
    name: web-prod
    directory: services/web
    file: compose.yml
    depends_on:
      - networks
    environment:
      TAG: 1.2
      DEBUG: true
      EMPTY:
  worker:
    file: [a.yml, b.yml]
    depends_on: [networks]
"""


# ─────────────────────────────────────────────
# DISCOVERY
# ─────────────────────────────────────────────
class TestFindStacksFile:
    def test_in_cwd(self):
        ws = _make_workspace({"stacks.yml": BASIC})
        assert find_stacks_file(cwd=ws) == Path(ws).resolve() / "stacks.yml"
        shutil.rmtree(ws)

    def test_in_parent(self):
        ws = _make_workspace({"stacks.yml": BASIC, "a/b/.keep": ""})
        found = find_stacks_file(cwd=os.path.join(ws, "a", "b"))
        assert found == Path(ws).resolve() / "stacks.yml"
        shutil.rmtree(ws)

    def test_yaml_extension(self):
        ws = _make_workspace({"stacks.yaml": BASIC})
        assert find_stacks_file(cwd=ws).name == "stacks.yaml"
        shutil.rmtree(ws)

    def test_yml_preferred(self):
        ws = _make_workspace({"stacks.yml": BASIC, "stacks.yaml": BASIC})
        assert find_stacks_file(cwd=ws).name == "stacks.yml"
        shutil.rmtree(ws)

    def test_explicit_file(self):
        ws = _make_workspace({"conf/other.yml": BASIC})
        found = find_stacks_file("conf/other.yml", cwd=ws)
        assert found == Path(ws).resolve() / "conf" / "other.yml"
        shutil.rmtree(ws)

    def test_explicit_missing(self):
        ws = _make_workspace({})
        with pytest.raises(ConfigError, match="does not exist"):
            find_stacks_file("nope.yml", cwd=ws)
        shutil.rmtree(ws)

    def test_explicit_directory(self):
        ws = _make_workspace({"sub/.keep": ""})
        with pytest.raises(ConfigError, match="not a file"):
            find_stacks_file("sub", cwd=ws)
        shutil.rmtree(ws)

    def test_not_found(self, monkeypatch, tmp_path):
        # No stacks file in tmp_path or its parents
        monkeypatch.setattr(
            "stacks.config.loader.STACKS_FILENAMES", ("unlikely-stacks-name.yml",),
        )
        with pytest.raises(ConfigError, match="No stacks.yml"):
            find_stacks_file(cwd=tmp_path)


# ─────────────────────────────────────────────
# LOAD
# ─────────────────────────────────────────────
class TestLoadConfig:
    def test_load(self):
        ws = _make_workspace({"stacks.yml": BASIC})
        config = load_config(os.path.join(ws, "stacks.yml"))
        assert isinstance(config, Config)
        assert config.base_dir == Path(ws).resolve()
        assert config.command == DEFAULT_COMMAND
        assert list(config.graph) == ["networks", "web", "worker"]

        web = config.graph["web"]
        assert web.name == "web-prod"
        assert web.directory == "services/web"
        assert web.files == ("compose.yml",)
        assert web.depends_on == ("networks",)
        assert dict(web.environment) == {"TAG": "1.2", "DEBUG": "true", "EMPTY": ""}

        worker = config.graph["worker"]
        assert worker.name == "worker"
        assert worker.directory == "worker"
        assert worker.files == ("a.yml", "b.yml")
        shutil.rmtree(ws)

    def test_invalid_yaml(self):
        ws = _make_workspace({"stacks.yml": "stacks: [unclosed\n"})
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(os.path.join(ws, "stacks.yml"))
        shutil.rmtree(ws)

    def test_missing_file(self):
        with pytest.raises(ConfigError, match="Failed to open"):
            load_config("/nonexistent/stacks.yml")

    def test_not_utf8(self):
        ws = _make_workspace({})
        path = os.path.join(ws, "stacks.yml")
        with open(path, "wb") as f:
            f.write(b"stacks:\n  web:\n    environment:\n      A: \"\xff\xfe\"\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(path)
        shutil.rmtree(ws)

    def test_empty_file(self):
        ws = _make_workspace({"stacks.yml": ""})
        config = load_config(os.path.join(ws, "stacks.yml"))
        assert len(config.graph) == 0
        shutil.rmtree(ws)


# ─────────────────────────────────────────────
# PARSE
# ─────────────────────────────────────────────
class TestParseConfig:
    def test_command_string(self):
        config = parse_config_dict({"command": "podman compose --ansi never"})
        assert config.command == ["podman", "compose", "--ansi", "never"]

    def test_command_list(self):
        config = parse_config_dict({"command": ["docker-compose"]})
        assert config.command == ["docker-compose"]

    def test_command_empty(self):
        with pytest.raises(ConfigError, match="must not be empty"):
            parse_config_dict({"command": ""})

    def test_command_wrong_type(self):
        with pytest.raises(ConfigError, match="command"):
            parse_config_dict({"command": 5})

    def test_null_stack_entry(self):
        config = parse_config_dict({"stacks": {"db": None}})
        assert config.graph["db"].name == "db"

    def test_top_level_not_mapping(self):
        with pytest.raises(ConfigError, match="mapping"):
            parse_config_dict(["stacks"])

    def test_stacks_not_mapping(self):
        with pytest.raises(ConfigError, match="stacks must be a mapping"):
            parse_config_dict({"stacks": ["a", "b"]})

    def test_stack_not_mapping(self):
        with pytest.raises(ConfigError, match="stacks.web must be a mapping"):
            parse_config_dict({"stacks": {"web": "oops"}})

    def test_name_not_string(self):
        with pytest.raises(ConfigError, match="stacks.web.name"):
            parse_config_dict({"stacks": {"web": {"name": 3}}})

    def test_depends_on_not_list(self):
        with pytest.raises(ConfigError, match="depends_on"):
            parse_config_dict({"stacks": {"web": {"depends_on": "db"}}})

    def test_file_wrong_type(self):
        with pytest.raises(ConfigError, match="file"):
            parse_config_dict({"stacks": {"web": {"file": {"a": 1}}}})

    def test_environment_not_mapping(self):
        with pytest.raises(ConfigError, match="environment"):
            parse_config_dict({"stacks": {"web": {"environment": ["A=1"]}}})

    def test_environment_list_value(self):
        with pytest.raises(ConfigError, match="stacks.web.environment.A must be a scalar"):
            parse_config_dict({"stacks": {"web": {"environment": {"A": [1, 2]}}}})

    def test_environment_mapping_value(self):
        with pytest.raises(ConfigError, match="stacks.web.environment.B must be a scalar"):
            parse_config_dict({"stacks": {"web": {"environment": {"B": {"x": 1}}}}})

    def test_numeric_stack_key_can_be_depended_on(self):
        config = parse_config_dict({"stacks": {1: {}, "web": {"depends_on": [1]}}})
        assert list(config.graph) == ["1", "web"]
        assert config.graph["web"].depends_on == ("1",)

    def test_boolean_dependency_rejected(self):
        with pytest.raises(ConfigError, match="depends_on"):
            parse_config_dict({"stacks": {"web": {"depends_on": [True]}}})

    def test_references_not_checked_here(self):
        # Dangling references are the resolver's job
        config = parse_config_dict({"stacks": {"web": {"depends_on": ["db"]}}})
        assert config.graph["web"].depends_on == ("db",)

    def test_error_kind(self):
        with pytest.raises(ConfigError) as exc:
            parse_config_dict({"stacks": 1})
        assert exc.value.kind == "config"
