"""SQLAlchemy models registry for the settings database."""

from .settings import Base, StSetting

__all__ = [
    "Base",
    "StSetting",
]
