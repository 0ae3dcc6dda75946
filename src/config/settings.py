"""Application configuration settings."""

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Optional


@dataclass
class HierarchySettings:
    """Department tree configuration."""

    # Bounds for tree projection depth (requests outside are clamped)
    min_depth: int = 1
    max_depth: int = 5
    default_depth: int = 1

    include_employees_by_default: bool = True

    max_name_length: int = 200

    def clamp_depth(self, depth: Optional[int]) -> int:
        """Clamp a requested projection depth into the configured bounds."""
        if depth is None:
            return self.default_depth
        return max(self.min_depth, min(self.max_depth, depth))


@dataclass
class Settings:
    """Main application settings."""

    # Application info
    app_name: str = "Organizational Structure API"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # Hierarchy
    hierarchy: HierarchySettings = field(default_factory=HierarchySettings)

    @classmethod
    def from_env(cls) -> "Settings":
        """Create settings from environment variables."""
        return cls(
            app_name=os.getenv("APP_NAME", "Organizational Structure API"),
            app_version=os.getenv("APP_VERSION", "1.0.0"),
            debug=os.getenv("DEBUG", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            hierarchy=HierarchySettings(
                default_depth=int(os.getenv("TREE_DEFAULT_DEPTH", "1")),
                include_employees_by_default=(
                    os.getenv("TREE_INCLUDE_EMPLOYEES", "true").lower() == "true"
                ),
            ),
        )


# Singleton settings instance
_settings: Optional[Settings] = None


@lru_cache()
def get_settings() -> Settings:
    """Get application settings (cached)."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None
    get_settings.cache_clear()
