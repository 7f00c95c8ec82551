"""Plugins running alongside the crawl and audit.

Every loaded plugin gets its own thread when the scan starts. Plugins may
push pages onto the framework's page queue; the framework joins them before
finalizing and then drains the queue once more.
"""

import logging
import threading
from typing import Any, ClassVar, Dict, List, Optional

from ..models.options import ScanOptions
from ..utils.failure import failure_barrier
from .base import ComponentInfo, ComponentRegistry


logger = logging.getLogger(__name__)


class BasePlugin:
    """Base class for plugins. Subclasses override ``run()``."""

    shortname: ClassVar[Optional[str]] = None
    info: ClassVar[ComponentInfo] = ComponentInfo(name="Base plugin")

    def __init__(self, framework: Any, options: ScanOptions):
        self.framework = framework
        self.options = options

    def prepare(self) -> None:
        pass

    def run(self) -> None:
        pass

    def clean_up(self) -> None:
        pass


class PluginRegistry(ComponentRegistry):
    """Registry of plugins and the threads running them."""

    component_type = "plugin"
    base_class = BasePlugin
    entry_point_group = "webaudit.plugins"

    def __init__(self, framework: Any = None):
        super().__init__()
        self.framework = framework
        self._threads: Dict[str, threading.Thread] = {}

    def run(self) -> List[str]:
        """Start every loaded plugin in its own thread.

        Returns:
            Names of the plugins started
        """
        options = getattr(self.framework, "options", None)
        started = []

        for name, plugin_class in self.items():
            thread = threading.Thread(
                target=self._run_plugin,
                args=(name, plugin_class, options),
                name=f"plugin-{name}",
                daemon=True
            )
            self._threads[name] = thread
            thread.start()
            started.append(name)
            logger.info(f"Started plugin: {name}")

        return started

    def block(self) -> None:
        """Wait for every started plugin to finish."""
        for name, thread in list(self._threads.items()):
            thread.join()
            logger.debug(f"Plugin finished: {name}")
        self._threads.clear()

    def busy(self) -> bool:
        """Check if any plugin is still running."""
        return any(thread.is_alive() for thread in self._threads.values())

    def _run_plugin(self, name: str, plugin_class: type, options: Optional[ScanOptions]) -> None:
        def lifecycle():
            plugin = plugin_class(self.framework, options)
            plugin.prepare()
            plugin.run()
            plugin.clean_up()

        failure_barrier(lifecycle, f"plugin '{name}'", log=logger)
