"""Configuration module for the medicine reminder."""

from .settings import Settings

# Create a singleton settings instance
settings = Settings()

__all__ = ["settings", "Settings"]
