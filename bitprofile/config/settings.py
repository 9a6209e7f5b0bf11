"""
Shared configuration for bitprofile.

Every setting can be overridden through an environment variable; a `.env`
file in the working directory is read (without overriding variables that
are already set) the first time the configuration is built.

Usage:
    from bitprofile.config import get_config

    config = get_config()
    store = RecordStore.from_config(config)
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv


def _split_paths(value: str) -> List[Path]:
    return [Path(part.strip()) for part in value.split(",") if part.strip()]


@dataclass
class BitProfileConfig:
    """
    Runtime configuration for the analysis engine and record store.

    All settings can be overridden via environment variables.
    """

    # ==================== Record Store ====================
    store_path: Path = field(
        default_factory=lambda: Path(
            os.getenv("BITPROFILE_STORE_PATH", "data/models/model.json")
        )
    )

    # Legacy/fragment locations folded in by consolidation
    fragment_paths: List[Path] = field(
        default_factory=lambda: _split_paths(
            os.getenv("BITPROFILE_FRAGMENT_PATHS", "data/models")
        )
    )

    backup_dir: Path = field(
        default_factory=lambda: Path(os.getenv("BITPROFILE_BACKUP_DIR", "data/backups"))
    )

    max_records: int = field(
        default_factory=lambda: int(os.getenv("BITPROFILE_MAX_RECORDS", "1000"))
    )

    # Number of clean symbols that take part in the identity hash
    identity_prefix_length: int = field(
        default_factory=lambda: int(os.getenv("BITPROFILE_IDENTITY_PREFIX", "100"))
    )

    # Weight of the i-th newest record in a consolidation group is decay**i
    merge_decay: float = field(
        default_factory=lambda: float(os.getenv("BITPROFILE_MERGE_DECAY", "0.8"))
    )

    # ==================== Prediction ====================
    prediction_length: int = field(
        default_factory=lambda: int(os.getenv("BITPROFILE_PREDICTION_LENGTH", "8"))
    )

    # ==================== Background Consolidation ====================
    consolidation_min_interval: float = field(
        default_factory=lambda: float(
            os.getenv("BITPROFILE_CONSOLIDATION_MIN_INTERVAL", "60")
        )
    )
    consolidation_max_interval: float = field(
        default_factory=lambda: float(
            os.getenv("BITPROFILE_CONSOLIDATION_MAX_INTERVAL", "300")
        )
    )

    # ==================== Logging ====================
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_mode: str = field(
        default_factory=lambda: os.getenv("LOG_MODE", "development")
    )  # development or production
    log_dir: str = field(default_factory=lambda: os.getenv("LOG_DIR", "logs"))

    def __post_init__(self):
        """Validate configuration after initialization"""
        self.store_path = Path(self.store_path)
        self.backup_dir = Path(self.backup_dir)
        self.fragment_paths = [Path(p) for p in self.fragment_paths]

        if self.max_records <= 0:
            raise ValueError("max_records must be positive")
        if self.identity_prefix_length <= 0:
            raise ValueError("identity_prefix_length must be positive")
        if not 0 < self.merge_decay <= 1:
            raise ValueError("merge_decay must be in (0, 1]")
        if self.prediction_length <= 0:
            raise ValueError("prediction_length must be positive")
        if self.consolidation_min_interval <= 0:
            raise ValueError("consolidation_min_interval must be positive")
        if self.consolidation_max_interval < self.consolidation_min_interval:
            raise ValueError(
                "consolidation_max_interval must be >= consolidation_min_interval"
            )
        if self.log_mode not in ("development", "production"):
            raise ValueError("log_mode must be 'development' or 'production'")

    def to_dict(self) -> dict:
        """Convert configuration to dictionary"""
        return {
            field_name: getattr(self, field_name)
            for field_name in self.__dataclass_fields__
        }


_config: Optional[BitProfileConfig] = None


def get_config() -> BitProfileConfig:
    """
    Get the process-wide configuration instance

    Returns:
        BitProfileConfig instance
    """
    global _config
    if _config is None:
        load_dotenv()
        _config = BitProfileConfig()
    return _config


def reload_config() -> BitProfileConfig:
    """
    Reload configuration from environment variables

    Returns:
        New BitProfileConfig instance
    """
    global _config
    load_dotenv()
    _config = BitProfileConfig()
    return _config
