# -*- coding: utf-8 -*-
"""
Settings management using pydantic-settings
"""

import json
import sys
from pathlib import Path
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_platform() -> str:
    return "macos" if sys.platform == "darwin" else "other"


class AppSettings(BaseSettings):
    """Application settings, overridable with SCREENEDIT_* variables"""

    model_config = SettingsConfigDict(
        env_prefix="SCREENEDIT_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    ffmpeg_path: Optional[str] = None
    ffprobe_path: Optional[str] = None
    recordings_dir: Path = Path.home() / ".screenedit" / "recordings"
    export_dir: Path = Path.home() / "Downloads"
    probe_timeout: float = 10.0
    export_timeout: Optional[float] = None
    platform: Literal["macos", "other"] = _default_platform()
    log_file: Optional[str] = "screenedit.log"
    log_level: str = "INFO"


def load_settings(config_path: Optional[Path] = None) -> AppSettings:
    """Loads settings from config.json when present, else from the environment"""
    config_path = config_path or Path("config.json")
    if config_path.exists():
        with open(config_path, "r", encoding="utf-8") as f:
            config_data = json.load(f)
        return AppSettings(**config_data)

    return AppSettings()


settings = load_settings()
