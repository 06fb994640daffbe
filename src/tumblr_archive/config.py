"""Configuration loading and saving.

Config file location: ~/.config/tumblr-archive/config.toml

Schema:
    [archive]
    path = "."  # TumblThree blogs directory

    [media]
    image_trim = "size_suffix"  # photo URLs in the legacy text format
    media_trim = "extension"  # downloaded media file lists, videos

    [output]
    indent = 2
"""

import tomllib
from dataclasses import dataclass
from pathlib import Path

import tomli_w

from .media import TrimRule

CONFIG_DIR = Path.home() / ".config" / "tumblr-archive"
CONFIG_FILE = CONFIG_DIR / "config.toml"


@dataclass
class AppConfig:
    archive_path: Path = Path(".")
    image_trim: TrimRule = TrimRule.SIZE_SUFFIX
    media_trim: TrimRule = TrimRule.EXTENSION
    indent: int = 2


def _parse_trim(value: str, key: str) -> TrimRule:
    try:
        return TrimRule(value)
    except ValueError:
        choices = ", ".join(r.value for r in TrimRule)
        raise ValueError(f"Config media.{key} must be one of: {choices}") from None


def load_config(config_path: Path = CONFIG_FILE) -> AppConfig:
    """Load and validate config from TOML file."""
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    archive_data = data.get("archive", {})
    media_data = data.get("media", {})
    output_data = data.get("output", {})

    indent = output_data.get("indent", 2)
    if not isinstance(indent, int) or indent < 0:
        raise ValueError("Config output.indent must be a non-negative integer")

    return AppConfig(
        archive_path=Path(archive_data.get("path", ".")).expanduser(),
        image_trim=_parse_trim(media_data.get("image_trim", "size_suffix"), "image_trim"),
        media_trim=_parse_trim(media_data.get("media_trim", "extension"), "media_trim"),
        indent=indent,
    )


def save_config(config: AppConfig, config_path: Path = CONFIG_FILE) -> None:
    """Write config to TOML file."""
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = {
        "archive": {
            "path": str(config.archive_path),
        },
        "media": {
            "image_trim": config.image_trim.value,
            "media_trim": config.media_trim.value,
        },
        "output": {
            "indent": config.indent,
        },
    }

    with open(config_path, "wb") as f:
        tomli_w.dump(data, f)


def config_exists(config_path: Path = CONFIG_FILE) -> bool:
    """Check if config file exists."""
    return config_path.exists()
