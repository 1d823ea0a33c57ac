"""Build configuration loaded from YAML."""

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .errors import ConfigError

DEFAULT_OUT_DIR = "kout"
KUSTO_EXTENSIONS = (".kql", ".csl", ".kusto")
CONFIG_FILENAME = "ksd.yaml"


def _normalize_extension(ext: str) -> str:
    ext = ext.strip().lower()
    return ext if ext.startswith(".") else f".{ext}"


@dataclass
class BuildConfig:
    """Settings for building a source tree.

    ``out_dir`` is resolved against the source root unless absolute.
    """
    out_dir: str = DEFAULT_OUT_DIR
    extensions: list[str] = field(default_factory=lambda: list(KUSTO_EXTENSIONS))
    skip_dirs: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "BuildConfig":
        """Build from the parsed YAML document.

        Only the ``build`` section is read, e.g.::

            build:
              out_dir: kout
              extensions: [.kql, .csl, .kusto]
              skip_dirs: [drafts]
        """
        build = data.get("build") or {}
        if not isinstance(build, dict):
            raise ConfigError("'build' must be a mapping")

        config = cls()
        if "out_dir" in build:
            if not isinstance(build["out_dir"], str) or not build["out_dir"]:
                raise ConfigError("'build.out_dir' must be a non-empty string")
            config.out_dir = build["out_dir"]

        for key in ("extensions", "skip_dirs"):
            if key not in build:
                continue
            value = build[key]
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                raise ConfigError(f"'build.{key}' must be a list of strings")
            setattr(config, key, value)

        config.extensions = [_normalize_extension(e) for e in config.extensions]
        return config


def load_config(config_path: Path) -> BuildConfig:
    """Load configuration from a YAML file."""
    if not config_path.exists():
        raise ConfigError(f"config file not found: {config_path}")

    try:
        data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in {config_path}: {e}") from e

    if data is None:
        return BuildConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"{config_path} must contain a mapping")
    return BuildConfig.from_dict(data)


def resolve_config(source_root: Path, config_path: Path | None = None) -> BuildConfig:
    """Load ``config_path`` if given, else ``ksd.yaml`` under the source root if present."""
    if config_path is not None:
        return load_config(config_path)

    default = source_root / CONFIG_FILENAME
    if default.exists():
        return load_config(default)
    return BuildConfig()
