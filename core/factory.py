"""Registry that maps string identifiers to instance factories."""

import importlib
import logging
from typing import Any, Callable, Dict, Iterable, Optional

from core.errors import InstanceAccessError, InstanceConstructionError, InstanceNotFoundError


class InstanceFactory:
    """Builds plug-in instances by name.

    Names are looked up in the registry first. A name that is not registered but
    looks like a dotted path (``package.module:Class`` or ``package.module.Class``)
    is imported and called without arguments.
    """

    def __init__(
        self,
        factories: Optional[Dict[str, Callable[[], Any]]] = None,
        allowed_modules: Optional[Iterable[str]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._factories: Dict[str, Callable[[], Any]] = dict(factories or {})
        self.allowed_modules = tuple(allowed_modules or ())
        self.log = logger or logging.getLogger(__name__)

    def register(self, name: str, factory: Optional[Callable[[], Any]] = None):
        """
        Register ``factory`` under ``name``. Without a factory, returns a decorator.
        """
        if factory is not None:
            self._factories[name] = factory
            return factory

        def decorator(fn):
            self._factories[name] = fn
            return fn

        return decorator

    def names(self):
        return list(self._factories.keys())

    def __contains__(self, name: str) -> bool:
        return name in self._factories

    def instantiate(self, name: str):
        factory = self._factories.get(name)
        if factory is None:
            factory = self._resolve_path(name)

        try:
            instance = factory()
        except Exception as e:
            raise InstanceConstructionError(f"Failed to construct {name}: {e}", name) from e

        self.log.debug("Instantiated %s -> %s", name, type(instance).__name__)
        return instance

    def _resolve_path(self, name: str) -> Callable[[], Any]:
        module_name, attr = self._split_path(name)
        if module_name is None:
            raise InstanceNotFoundError(
                f"{name} not found in registry. Available: {self.names()}", name
            )

        segments = module_name.split(".") + attr.split(".")
        if any(s.startswith("_") for s in segments):
            raise InstanceAccessError(f"{name} refers to a private name", name)
        if self.allowed_modules and not any(
            module_name == m or module_name.startswith(m + ".") for m in self.allowed_modules
        ):
            raise InstanceAccessError(f"Module {module_name} is not allowed for instantiation", name)

        try:
            target = importlib.import_module(module_name)
            for part in attr.split("."):
                target = getattr(target, part)
        except (ImportError, AttributeError) as e:
            raise InstanceNotFoundError(f"{name} could not be imported: {e}", name) from e

        if not callable(target):
            raise InstanceAccessError(f"{name} is not callable", name)
        return target

    @staticmethod
    def _split_path(name: str):
        if ":" in name:
            module_name, _, attr = name.partition(":")
            return (module_name, attr) if module_name and attr else (None, None)
        if "." in name:
            module_name, _, attr = name.rpartition(".")
            return module_name, attr
        return None, None
