"""
Centralized settings and path configuration for the roof estimator.
"""
import os
from pathlib import Path
from dataclasses import dataclass
from typing import Optional


def get_project_root() -> Path:
    """Get the project root directory (where pyproject.toml lives)."""
    # Walk up from this file to find the project root
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / 'pyproject.toml').exists():
            return parent
    # Fallback to 3 levels up from this file
    return Path(__file__).resolve().parent.parent.parent.parent


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    # Project paths
    project_root: Path
    data_dir: Path

    # Persisted pricing configuration (single row)
    pricing_settings_csv: Path

    # External APIs
    google_maps_api_key: Optional[str] = None
    request_timeout_seconds: float = 10.0

    log_level: str = "INFO"

    @classmethod
    def load(cls, project_root: Optional[Path] = None) -> 'Settings':
        """Load settings from the project structure and environment."""
        root = project_root or get_project_root()

        data_dir = Path(os.environ.get('ROOF_ESTIMATOR_DATA_DIR', root / 'data'))

        return cls(
            project_root=root,
            data_dir=data_dir,
            pricing_settings_csv=data_dir / 'pricing_settings.csv',
            google_maps_api_key=os.environ.get('GOOGLE_MAPS_API_KEY') or None,
            log_level=os.environ.get('ROOF_ESTIMATOR_LOG_LEVEL', 'INFO').upper(),
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings
