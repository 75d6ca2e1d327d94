"""Configuration management for deary."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

CONFIG_FILE = Path(
    os.environ.get("DEARY_CONFIG", Path.home() / ".config" / "deary" / "deary.conf")
)
DEFAULT_REPO_DIR = Path.home() / ".deary"
DEFAULT_SCRATCH_DIR = Path("/dev/shm")
GPG_ID_FILE = ".gpg_id"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass
class Config:
    """deary configuration."""

    repo_dir: Path = DEFAULT_REPO_DIR
    scratch_dir: Path = DEFAULT_SCRATCH_DIR
    require_memory_scratch: bool = True
    editor: str = ""
    gpg_binary: str = "gpg"
    git_binary: str = "git"
    git_user_name: str = "noname"
    git_user_email: str = "noemail"


def _parse_bool(key: str, value: str, default: bool) -> bool:
    lowered = value.lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    logger.warning(f"Ignoring invalid boolean for {key.upper()}: {value!r}")
    return default


def _unquote(value: str) -> str:
    # Handle quoted values with inline comments: "value" # comment
    for quote in ('"', "'"):
        if value.startswith(quote):
            end_quote = value.find(quote, 1)
            return value[1:end_quote] if end_quote != -1 else value[1:]
    # Unquoted: strip inline comments
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def load_config(path: Path | None = None) -> Config:
    """Load configuration from deary.conf, then apply DEARY_DIR."""
    config = Config()
    path = path or CONFIG_FILE

    if path.exists():
        for line in path.read_text().splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue

            if "=" not in line:
                continue

            key, _, value = line.partition("=")
            key = key.strip().lower()
            value = _unquote(value.strip())

            match key:
                case "repo_dir":
                    config.repo_dir = Path(value).expanduser()
                case "scratch_dir":
                    config.scratch_dir = Path(value).expanduser()
                case "require_memory_scratch":
                    config.require_memory_scratch = _parse_bool(
                        key, value, config.require_memory_scratch
                    )
                case "editor":
                    config.editor = value
                case "gpg_binary":
                    config.gpg_binary = value
                case "git_binary":
                    config.git_binary = value
                case "git_user_name":
                    config.git_user_name = value
                case "git_user_email":
                    config.git_user_email = value
                case _:
                    logger.debug(f"Unknown config key: {key}")

    repo_override = os.environ.get("DEARY_DIR")
    if repo_override:
        config.repo_dir = Path(repo_override).expanduser()

    return config
