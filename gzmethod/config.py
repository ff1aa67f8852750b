"""Configuration management for gzmethod."""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from ruamel.yaml import YAML

DEFAULT_COMPRESSION_LEVEL = 6
DEFAULT_CHUNK_SIZE = 524288  # 512 KiB

DEFAULT_CONFIG_PATH = Path.home() / ".config/gzmethod/config.yaml"


class GzipConfig(BaseModel):
    """Settings for the GZIP compression method.

    The level trades speed for size: 0 stores the data uncompressed and 9
    compresses hardest. Past 6 the size gains are small while the time cost
    grows quickly.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    compression_level: int = Field(
        default=DEFAULT_COMPRESSION_LEVEL, ge=0, le=9, description="GZIP compression level (0-9)"
    )
    chunk_size: int = Field(
        default=DEFAULT_CHUNK_SIZE, gt=0, description="Bytes read per chunk while streaming"
    )


class AppConfig(BaseModel):
    """Main configuration for gzmethod."""

    model_config = ConfigDict(validate_assignment=True)

    gzip: GzipConfig = Field(default_factory=GzipConfig)

    # Runtime settings
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: Optional[Path] = Field(default=None, description="Optional log file")
    show_progress: bool = Field(default=True, description="Show progress bars in the CLI")


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load configuration from file, falling back to defaults."""

    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    if not config_path.exists():
        return AppConfig()

    yaml = YAML(typ="safe")
    with open(config_path, "r") as f:
        data = yaml.load(f) or {}
    return AppConfig(**data)


def save_config(config: AppConfig, config_path: Optional[Path] = None) -> Path:
    """Save configuration to file."""

    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    config_path.parent.mkdir(parents=True, exist_ok=True)

    yaml = YAML()
    yaml.default_flow_style = False

    with open(config_path, "w") as f:
        yaml.dump(config.model_dump(mode="json"), f)

    return config_path


def get_config() -> AppConfig:
    """Get the global configuration instance."""

    if not hasattr(get_config, "_config"):
        get_config._config = load_config()

    return get_config._config
