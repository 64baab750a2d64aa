"""Registry for discovering scene classification models."""

from __future__ import annotations

import inspect
import logging
from importlib import import_module
from typing import Callable, Dict

from ..config import AppConfig
from .base import ModelInfo, SceneModel


Factory = Callable[..., SceneModel]
logger = logging.getLogger(__name__)

BUILTIN_MODULES = (
    "imagex.models.builtin.simple",
    "imagex.models.huggingface",
)


class ModelRegistry:
    """Tracks available model factories and lazily loads them on demand."""

    _factories: Dict[str, Factory] = {}
    _bootstrap_complete: bool = False

    @classmethod
    def register(cls, name: str, factory: Factory) -> None:
        """Register a model factory under the provided name."""
        cls._factories[name] = factory

    @classmethod
    def unregister(cls, name: str) -> None:
        cls._factories.pop(name, None)

    @classmethod
    def ensure_bootstrapped(cls) -> None:
        if cls._bootstrap_complete:
            return
        for module_name in BUILTIN_MODULES:
            try:
                module = import_module(module_name)
            except ImportError as exc:  # pragma: no cover - optional dependency paths
                logger.debug("Model module %s could not be imported: %s", module_name, exc)
                continue
            register = getattr(module, "register_models", None)
            if register is not None:
                register()
        cls._bootstrap_complete = True

    @classmethod
    def names(cls) -> list[str]:
        cls.ensure_bootstrapped()
        return sorted(cls._factories)

    @classmethod
    def list_model_infos(cls) -> list[ModelInfo]:
        """Return metadata for all registered models without loading them."""
        cls.ensure_bootstrapped()
        return [cls._factories[name]().info() for name in sorted(cls._factories)]

    @classmethod
    def create(cls, name: str, *, config: AppConfig | None = None) -> SceneModel:
        """Instantiate the model registered as ``name`` without loading it."""
        cls.ensure_bootstrapped()
        try:
            factory = cls._factories[name]
        except KeyError as exc:
            available = ", ".join(sorted(cls._factories))
            raise KeyError(f"Unknown model '{name}'. Available: {available}") from exc
        return cls._instantiate_factory(factory, config=config)

    @classmethod
    def get(cls, name: str, *, config: AppConfig | None = None) -> SceneModel:
        """Instantiate and load the model registered as ``name``."""
        instance = cls.create(name, config=config)
        logger.info("Loading model '%s'...", name)
        instance.load()
        logger.info("Model '%s' ready.", name)
        return instance

    @staticmethod
    def _instantiate_factory(factory: Factory, *, config: AppConfig | None) -> SceneModel:
        if config is not None and _accepts_config(factory):
            return factory(config)
        return factory()


def _accepts_config(factory: Factory) -> bool:
    """Whether ``factory`` can be called with the config as its first argument."""
    try:
        parameters = inspect.signature(factory).parameters.values()
    except (TypeError, ValueError):  # pragma: no cover - builtins without signatures
        return False
    positional = (
        inspect.Parameter.POSITIONAL_ONLY,
        inspect.Parameter.POSITIONAL_OR_KEYWORD,
        inspect.Parameter.VAR_POSITIONAL,
    )
    return any(parameter.kind in positional for parameter in parameters)
