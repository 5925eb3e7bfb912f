from __future__ import annotations
import os
import pathlib
import typing as t
import yaml

_DEFAULT_PATH = pathlib.Path("spemu.config.yml")

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 9010


class ConfigError(RuntimeError):
    """Raised for any user‑visible configuration problem."""


def _expand(value: t.Any) -> t.Any:
    # Allow `${ENV_VAR}` syntax so CI can inject IDs
    if isinstance(value, str) and value.startswith("${") and value.endswith("}"):
        return os.getenv(value[2:-1], "")
    return value


class Config:
    """
    A thin value‑object naming the emulator and the target database.
    Nothing here talks to Spanner.
    """

    def __init__(
        self,
        project_id: str = "",
        instance_id: str = "",
        database_id: str = "",
        emulator_host: str = "",
    ) -> None:
        self.project_id: str = project_id
        self.instance_id: str = instance_id
        self.database_id: str = database_id
        self.emulator_host: str = emulator_host

    @classmethod
    def from_dict(cls, d: dict[str, t.Any]) -> "Config":
        host = _expand(d.get("host", DEFAULT_HOST))
        port = _expand(d.get("port", DEFAULT_PORT))
        return cls(
            project_id=str(_expand(d.get("project", ""))),
            instance_id=str(_expand(d.get("instance", ""))),
            database_id=str(_expand(d.get("database", ""))),
            emulator_host=f"{host}:{port}",
        )

    def __repr__(self) -> str:
        return (
            f"Config(project_id={self.project_id!r}, instance_id={self.instance_id!r}, "
            f"database_id={self.database_id!r}, emulator_host={self.emulator_host!r})"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Config):
            return NotImplemented
        return vars(self) == vars(other)

    # --------------------------------------------------------------------- #
    # Helpers
    # --------------------------------------------------------------------- #
    def instance_path(self) -> str:
        return f"projects/{self.project_id}/instances/{self.instance_id}"

    def database_path(self) -> str:
        """Fully qualified resource name the Spanner client expects."""
        return f"{self.instance_path()}/databases/{self.database_id}"

    def merged(
        self,
        *,
        project_id: str | None = None,
        instance_id: str | None = None,
        database_id: str | None = None,
        port: int | None = None,
    ) -> "Config":
        """
        Return a copy where every non-empty keyword wins over the stored value.
        """
        host = self.emulator_host.rsplit(":", 1)[0] if self.emulator_host else DEFAULT_HOST
        if port is not None:
            emulator_host = f"{host}:{port}"
        else:
            emulator_host = self.emulator_host or f"{host}:{DEFAULT_PORT}"
        return Config(
            project_id=project_id or self.project_id,
            instance_id=instance_id or self.instance_id,
            database_id=database_id or self.database_id,
            emulator_host=emulator_host,
        )


def load(path: pathlib.Path | str | None = None, env: str | None = None) -> Config:
    """
    Parse *path* (or the default YAML) and return a :class:`Config`.
    """
    cfg_file = pathlib.Path(path) if path else _DEFAULT_PATH
    if not cfg_file.exists():
        raise ConfigError(f"Config file {cfg_file} not found.")

    try:
        with cfg_file.open(encoding="utf-8") as fh:
            raw = yaml.safe_load(fh) or {}
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"Cannot read config {cfg_file}: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigError(f"Config {cfg_file} must be a mapping")

    env_name = env or raw.get("default_env")
    if not env_name:
        raise ConfigError("No environment specified and no default_env in config")

    try:
        entry = raw["environments"][env_name] or {}
    except (KeyError, TypeError) as exc:
        raise ConfigError(f"Environment {env_name!r} not found in config") from exc
    if not isinstance(entry, dict):
        raise ConfigError(f"Environment {env_name!r} must be a mapping")
    return Config.from_dict(entry)
