from pathlib import Path

import pytest
import yaml

import vibeclaw.config as config_module
from vibeclaw.config import Config
from vibeclaw.exceptions import ConfigurationError


def test_defaults_match_install_policy():
    cfg = Config()

    assert cfg.security.risk_threshold == 25
    assert cfg.sources.branches == ["main", "master"]
    assert cfg.skills.record_filename == ".vibeclaw.json"
    assert cfg.catalog.api_key == ""


def test_state_dir_precedence(tmp_path: Path):
    cfg = Config()
    env = {
        "OPENCLAW_STATE_DIR": str(tmp_path / "openclaw"),
        "CLAWDBOT_STATE_DIR": str(tmp_path / "clawdbot"),
    }

    assert cfg.resolved_state_dir(env) == (tmp_path / "openclaw").resolve()
    assert cfg.resolved_state_dir({"CLAWDBOT_STATE_DIR": str(tmp_path / "clawdbot")}) == (
        tmp_path / "clawdbot"
    ).resolve()
    assert cfg.resolved_state_dir({"OPENCLAW_STATE_DIR": "  ", "CLAWDBOT_STATE_DIR": str(tmp_path / "c")}) == (
        tmp_path / "c"
    ).resolve()
    assert cfg.resolved_state_dir({}) == config_module.DEFAULT_STATE_DIR.resolve()

    cfg.skills.state_dir = str(tmp_path / "explicit")
    assert cfg.resolved_state_dir(env) == (tmp_path / "explicit").resolve()
    assert cfg.resolved_skills_dir(env) == (tmp_path / "explicit").resolve() / "skills"


def test_local_config_file_takes_precedence(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    home_config = tmp_path / "home" / "config.yaml"
    home_config.parent.mkdir()
    home_config.write_text(yaml.safe_dump({"security": {"risk_threshold": 50}}), encoding="utf-8")
    monkeypatch.setattr(config_module, "DEFAULT_CONFIG_PATH", home_config)
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)

    assert Config.load().security.risk_threshold == 50

    (workdir / "vibeclaw.yaml").write_text(
        yaml.safe_dump({"security": {"risk_threshold": 10}, "sources": {"branches": ["trunk"]}}),
        encoding="utf-8",
    )

    cfg = Config.load()
    assert cfg.security.risk_threshold == 10
    assert cfg.sources.branches == ["trunk"]


def test_missing_file_yields_defaults(tmp_path: Path):
    assert Config.load(tmp_path / "nope.yaml").security.risk_threshold == 25


def test_save_round_trips_through_yaml(tmp_path: Path):
    path = tmp_path / "out" / "config.yaml"
    cfg = Config()
    cfg.catalog.api_key = "secret"
    cfg.tools.max_limit = 7

    cfg.save(path)
    loaded = Config.load(path)

    assert loaded.catalog.api_key == "secret"
    assert loaded.tools.max_limit == 7


@pytest.mark.parametrize(
    "content",
    [
        "security: [unclosed\n",
        "- just\n- a list\n",
        "security:\n  risk_threshold: not-a-number\n",
    ],
)
def test_invalid_config_file_raises_configuration_error(tmp_path: Path, content: str):
    path = tmp_path / "config.yaml"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigurationError):
        Config.load(path)


def test_env_overrides_nested_values(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("VIBECLAW_CATALOG__API_KEY", "from-env")

    assert Config().catalog.api_key == "from-env"
