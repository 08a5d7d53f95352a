"""Configuration management for VibeClaw."""

import os
from collections.abc import Mapping
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from vibeclaw.exceptions import ConfigurationError


# Paths
DEFAULT_CONFIG_PATH = Path("~/.vibeclaw/config.yaml").expanduser()
LOCAL_CONFIG_FILENAME = "vibeclaw.yaml"
DEFAULT_STATE_DIR = Path("~/.openclaw").expanduser()

# First one set wins.
STATE_DIR_ENV_VARS: tuple[str, ...] = ("OPENCLAW_STATE_DIR", "CLAWDBOT_STATE_DIR")


class CatalogConfig(BaseModel):
    """Vibe Index catalog API configuration."""

    api_key: str = ""
    base_url: str = "https://vibeindex.ai/api/v1"
    timeout: float = 20.0


class SkillsConfig(BaseModel):
    """Installed skills layout."""

    state_dir: str = ""
    dir_name: str = "skills"
    skill_filename: str = "SKILL.md"
    record_filename: str = ".vibeclaw.json"
    installed_by: str = "vibeclaw"


class SourcesConfig(BaseModel):
    """Where SKILL.md files are probed for."""

    raw_base_url: str = "https://raw.githubusercontent.com"
    branches: list[str] = Field(default_factory=lambda: ["main", "master"])
    timeout: float = 30.0


class SecurityConfig(BaseModel):
    """Install gate policy."""

    risk_threshold: int = 25


class ToolsConfig(BaseModel):
    """Host tool defaults."""

    default_limit: int = 5
    max_limit: int = 10


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "console"


class Config(BaseSettings):
    """Main configuration for VibeClaw."""

    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    skills: SkillsConfig = Field(default_factory=SkillsConfig)
    sources: SourcesConfig = Field(default_factory=SourcesConfig)
    security: SecurityConfig = Field(default_factory=SecurityConfig)
    tools: ToolsConfig = Field(default_factory=ToolsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = SettingsConfigDict(
        env_prefix="VIBECLAW_",
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @classmethod
    def resolve_default_config_path(cls) -> Path:
        """Resolve default config path with local-first precedence."""
        local_path = Path.cwd() / LOCAL_CONFIG_FILENAME
        if local_path.exists():
            return local_path
        return DEFAULT_CONFIG_PATH

    @classmethod
    def from_yaml(cls, path: Path | str | None = None) -> "Config":
        """Load configuration from YAML file."""
        config_path = Path(path).expanduser() if path else cls.resolve_default_config_path()

        if not config_path.exists():
            return cls()

        try:
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {config_path} must contain a mapping")

        try:
            return cls(**data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration in {config_path}: {e}") from e

    @classmethod
    def load(cls, path: Path | str | None = None) -> "Config":
        """Load configuration from the resolved YAML file, or defaults."""
        return cls.from_yaml(path)

    def save(self, path: Path | str | None = None) -> None:
        """Save configuration to YAML file."""
        config_path = Path(path).expanduser() if path else DEFAULT_CONFIG_PATH
        config_path.parent.mkdir(parents=True, exist_ok=True)

        data = self.model_dump(exclude_none=True)

        with open(config_path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

    def resolved_state_dir(self, environ: Mapping[str, str] | None = None) -> Path:
        """Resolve the host state directory.

        Explicit ``skills.state_dir`` wins, then the state dir environment
        variables in order, then ``~/.openclaw``.
        """
        env = os.environ if environ is None else environ
        raw = str(self.skills.state_dir or "").strip()
        if not raw:
            for name in STATE_DIR_ENV_VARS:
                candidate = str(env.get(name, "") or "").strip()
                if candidate:
                    raw = candidate
                    break
        if not raw:
            return DEFAULT_STATE_DIR.resolve()
        return Path(raw).expanduser().resolve()

    def resolved_skills_dir(self, environ: Mapping[str, str] | None = None) -> Path:
        """Resolve the installation root for skills."""
        return self.resolved_state_dir(environ) / (self.skills.dir_name or "skills")


# Global config instance
_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config.load()
    return _config


def set_config(config: Config) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config
