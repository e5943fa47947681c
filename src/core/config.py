"""
Application settings.

Values come from (in increasing priority): the defaults below, an optional YAML file, and CLI-style dot-list overrides
(ex. ["engine_timeout=2.5"]). The merge is done by OmegaConf, validation by pydantic.
"""

from pathlib import Path
from typing import Any, Optional

from omegaconf import OmegaConf
from pydantic import BaseModel, ValidationError, field_validator

from src.core.exceptions import InvalidRequestError

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")
FEN_LOG_BACKENDS = ("file", "database")


class Settings(BaseModel):
    database_url: str = "sqlite:///chess.db"
    fen_log_path: Path = Path("chess-tui.fen")
    fen_log_backend: str = "file"
    engine_path: Optional[Path] = None
    engine_timeout: float = 10.0
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    @field_validator("engine_timeout")
    @classmethod
    def validate_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError(f"engine_timeout must be positive, got {value}")
        return value

    @field_validator("fen_log_backend")
    @classmethod
    def validate_fen_log_backend(cls, value: str) -> str:
        if value not in FEN_LOG_BACKENDS:
            raise ValueError(f"Unknown FEN log backend {value!r}. Pick one from {','.join(FEN_LOG_BACKENDS)}")
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level {value!r}. Pick one from {','.join(LOG_LEVELS)}")
        return level


def load_settings(
    config_path: str | Path | None = None, overrides: list[str] | None = None
) -> Settings:
    """Load settings from an optional YAML file with optional overrides.

    Args:
        config_path: Path to the YAML configuration file. Defaults are used when omitted.
        overrides: Optional list of CLI-style overrides (e.g., ["log_level=DEBUG"]).

    Returns:
        Validated settings.
    """
    config = OmegaConf.create(Settings().model_dump(mode="json"))

    if config_path is not None:
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        config = OmegaConf.merge(config, OmegaConf.load(config_path))

    if overrides:
        config = OmegaConf.merge(config, OmegaConf.from_dotlist(overrides))

    values: dict[str, Any] = OmegaConf.to_container(config, resolve=True)  # type: ignore[assignment]
    try:
        return Settings.model_validate(values)
    except ValidationError as exc:
        raise InvalidRequestError(f"Invalid settings: {exc}") from exc
