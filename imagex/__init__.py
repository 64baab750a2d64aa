"""Top-level package for the ImageX scene classifier."""

from .config import AppConfig, ResizeMode
from .services.analyzer import SceneAnalyzer
from .settings_store import SettingsStore

__all__ = ["AppConfig", "ResizeMode", "SceneAnalyzer", "SettingsStore"]
