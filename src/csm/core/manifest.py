"""
Build configuration for CSM.

Settings come from an optional `csm.toml` in the project root, with
environment overrides applied on top.

Example csm.toml:

    [build]
    output_dir = "target/csm"
    stale_after_hours = 24
    minify = true
    keep_aggregate = false
"""

import logging
import os
import tomllib
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path

from .errors import ConfigError

logger = logging.getLogger(__name__)

MANIFEST_FILE = "csm.toml"
OUTPUT_DIR_ENV = "CSM_OUTPUT_DIR"
DEFAULT_OUTPUT_DIR = "target/csm"


@dataclass
class BuildConfig:
    """Fragment store and bundle settings."""

    output_dir: Path = Path(DEFAULT_OUTPUT_DIR)
    stale_after_hours: float = 24  # Fragments older than this trigger a warning
    minify: bool = True
    keep_aggregate: bool = False  # Keep bundle.tmp.css after a rebuild

    @property
    def stale_after(self) -> timedelta:
        return timedelta(hours=self.stale_after_hours)


@dataclass
class CsmConfig:
    """Top-level configuration."""

    build: BuildConfig

    @classmethod
    def default(cls) -> "CsmConfig":
        return cls(build=BuildConfig())


def _parse_build(data: dict, base_dir: Path) -> BuildConfig:
    build = BuildConfig()

    if "output_dir" in data:
        output_dir = data["output_dir"]
        if not isinstance(output_dir, str) or not output_dir:
            raise ConfigError("[build] output_dir must be a non-empty string")
        build.output_dir = Path(output_dir)

    if "stale_after_hours" in data:
        hours = data["stale_after_hours"]
        if isinstance(hours, bool) or not isinstance(hours, int | float) or hours < 0:
            raise ConfigError("[build] stale_after_hours must be a non-negative number")
        build.stale_after_hours = hours

    for flag in ("minify", "keep_aggregate"):
        if flag in data:
            if not isinstance(data[flag], bool):
                raise ConfigError(f"[build] {flag} must be true or false")
            setattr(build, flag, data[flag])

    if not build.output_dir.is_absolute():
        build.output_dir = base_dir / build.output_dir

    return build


def load_config(project_root: Path | None = None) -> CsmConfig:
    """
    Load configuration for a project.

    Args:
        project_root: Directory holding csm.toml (default: current directory)

    Returns:
        CsmConfig with defaults for anything not specified

    Raises:
        ConfigError: If csm.toml is malformed or holds invalid values
    """
    root = project_root or Path.cwd()
    manifest_path = root / MANIFEST_FILE

    data: dict = {}
    if manifest_path.exists():
        try:
            with open(manifest_path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid {manifest_path}: {e}") from e
        logger.debug("Loaded configuration from %s", manifest_path)

    build_data = data.get("build", {})
    if not isinstance(build_data, dict):
        raise ConfigError("[build] must be a table")
    config = CsmConfig(build=_parse_build(build_data, root))

    env_output = os.environ.get(OUTPUT_DIR_ENV)
    if env_output:
        config.build.output_dir = Path(env_output)

    return config
