"""Shared registry machinery for modules, reports and plugins.

A registry knows every component class that has been registered (or
discovered through entry points) and keeps an ordered subset of them loaded.
Iteration order of loaded components is insertion order and is significant:
it is the order modules audit a page in and reports run in.
"""

import inspect
import logging
import threading
from importlib.metadata import entry_points
from typing import Any, Dict, Iterator, List, Optional, Tuple

from pydantic import BaseModel, Field


logger = logging.getLogger(__name__)


class ComponentNotFoundError(Exception):
    """Raised when a component name is not registered."""
    pass


class ComponentInfo(BaseModel):
    """Declared metadata of a component."""

    name: str = Field(description="Human readable name")
    description: str = Field(default="", description="What the component does")
    author: str = Field(default="", description="Component author")
    version: str = Field(default="0.1", description="Component version")
    dependencies: List[str] = Field(
        default_factory=list,
        description="Names of components this one depends on"
    )

    class Config:
        """Pydantic configuration."""
        str_strip_whitespace = True
        use_enum_values = True


class ComponentRegistry:
    """Registry of available component classes and the loaded subset.

    Subclasses set ``base_class`` to restrict what can be registered and
    ``entry_point_group`` for discovery.
    """

    component_type: str = "component"
    base_class: Optional[type] = None
    entry_point_group: Optional[str] = None

    def __init__(self):
        self._lock = threading.RLock()
        self._available: Dict[str, type] = {}
        self._loaded: Dict[str, type] = {}

    def register(self, component_class: type, name: Optional[str] = None) -> str:
        """Register a component class.

        Args:
            component_class: The class to register
            name: Optional name override (defaults to the class ``shortname``
                attribute, then the class name)

        Returns:
            The name the component was registered under
        """
        if self.base_class is not None and not issubclass(component_class, self.base_class):
            raise ValueError(
                f"{self.component_type.capitalize()} class must inherit from "
                f"{self.base_class.__name__}: {component_class}"
            )

        if name is None:
            name = getattr(component_class, "shortname", None) or component_class.__name__

        with self._lock:
            self._available[name] = component_class
            # Re-registering replaces a loaded entry in place
            if name in self._loaded:
                self._loaded[name] = component_class

        logger.debug(f"Registered {self.component_type}: {name}")
        return name

    def discover(self, group: Optional[str] = None) -> List[str]:
        """Register components advertised through package entry points.

        Entry points that fail to import are logged and skipped.

        Returns:
            Names registered by this call
        """
        group = group or self.entry_point_group
        if not group:
            return []

        registered = []
        for entry_point in entry_points(group=group):
            try:
                component_class = entry_point.load()
                registered.append(self.register(component_class, entry_point.name))
            except Exception as e:
                logger.error(f"Failed to load {self.component_type} '{entry_point.name}': {e}")

        return registered

    def available(self) -> List[str]:
        """Names of every registered component, in registration order."""
        with self._lock:
            return list(self._available.keys())

    def name_to_path(self, name: str) -> str:
        """Resolve a component name to the file that defines it."""
        component_class = self._get_class(name)
        try:
            return inspect.getsourcefile(component_class) or inspect.getfile(component_class)
        except TypeError:
            return f"<{component_class.__module__}>"

    def info(self, name: str) -> BaseModel:
        """Return a copy of the declared metadata of a component."""
        return self._get_class(name).info.model_copy(deep=True)

    def load(self, names: List[str]) -> List[str]:
        """Load components by name; '*' loads every available component.

        Returns:
            Names that were loaded

        Raises:
            ComponentNotFoundError: If a name is not registered
        """
        if "*" in names:
            names = self.available()

        for name in names:
            self[name]

        return list(names)

    def __getitem__(self, name: str) -> type:
        """Load (if needed) and return the component class for ``name``."""
        component_class = self._get_class(name)
        with self._lock:
            if name not in self._loaded:
                self._loaded[name] = component_class
                logger.debug(f"Loaded {self.component_type}: {name}")
        return component_class

    def clear(self) -> None:
        """Unload every loaded component. Registrations are kept."""
        with self._lock:
            self._loaded.clear()

    def keys(self) -> List[str]:
        """Names of loaded components in load order."""
        with self._lock:
            return list(self._loaded.keys())

    def items(self) -> List[Tuple[str, type]]:
        """(name, class) pairs of loaded components in load order."""
        with self._lock:
            return list(self._loaded.items())

    def values(self) -> List[type]:
        """Loaded component classes in load order."""
        with self._lock:
            return list(self._loaded.values())

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __len__(self) -> int:
        with self._lock:
            return len(self._loaded)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._loaded

    def get_status(self) -> Dict[str, Dict[str, Any]]:
        """Get registration and load status of every component."""
        with self._lock:
            return {
                name: {
                    "registered": True,
                    "loaded": name in self._loaded,
                    "class": f"{component_class.__module__}.{component_class.__qualname__}"
                }
                for name, component_class in self._available.items()
            }

    def _get_class(self, name: str) -> type:
        with self._lock:
            try:
                return self._available[name]
            except KeyError:
                raise ComponentNotFoundError(f"Unknown {self.component_type}: '{name}'")
