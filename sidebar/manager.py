"""
Sidebar Manager

Wires the registry, locator, layout engine, controller and status
indicator together and exposes the public control surface.
"""

from __future__ import annotations
import logging
import os
import time
from typing import Any, List, Mapping, Optional, Union

from pubsub import pub
from pubsub.core import Publisher

from . import topics
from .commands import CommandDispatcher
from .config import PanelConfig, SidebarConfig, parse_panels
from .controller import ExclusivityController
from .host import Host
from .layout import LayoutEngine
from .locator import WindowLocator
from .protocol import Edge
from .registry import PanelRegistry
from .status import StatusIndicator

logger = logging.getLogger(__name__)


class SidebarManager:
    """
    Sidebar Manager

    Coordinates panel windows docked at the edges of a host.
    """

    def __init__(
        self,
        host: Host,
        config: Optional[SidebarConfig] = None,
        clock=time.monotonic,
        bus: Optional[Publisher] = None,
    ):
        """Initialize the sidebar manager.

        Each manager owns its own event bus unless one is passed in, so
        several managers never see each other's events.

        Architecture:
        1. Create the event bus, registry, locator and layout engine
        2. Create components - they self-subscribe to events
        3. Set up host callbacks to bridge host events into the bus
        """
        self.host = host
        self.config = config or SidebarConfig()
        self.bus = bus if bus is not None else Publisher()

        # Setup debug event logging if enabled
        if os.getenv("SIDEBAR_DEBUG"):
            self.bus.subscribe(self.debug_event_logger, pub.ALL_TOPICS)

        self.registry = PanelRegistry()
        self.locator = WindowLocator(self.registry, host)
        self.layout = LayoutEngine(self.config, host)

        # Exclusivity state machine (self-subscribes to command events)
        self.controller = ExclusivityController(
            self.bus,
            self.registry,
            self.locator,
            self.layout,
            host,
            self.config,
            clock=clock,
        )

        # Status display (self-subscribes to settle notifications)
        self.status: Optional[StatusIndicator] = None
        if self.config.statusline_enabled:
            settings = self.config.statusline
            self.status = StatusIndicator.from_settings(
                self.bus,
                self.registry,
                settings if isinstance(settings, Mapping) else None,
            )

        # User commands (publish command events)
        self.commands = CommandDispatcher(self.bus, self.registry)

        self._setup_callbacks()

    def debug_event_logger(self, topic=pub.AUTO_TOPIC, **kwargs):
        """Log all events published on the event bus."""
        data_str = ", ".join(f"{k}={v}" for k, v in kwargs.items() if k != "topic")
        logger.debug("EVENT: %s | %s", topic.getName(), data_str)

    def _setup_callbacks(self):
        """Bridge host events into the event bus."""
        self.host.on_window_shown = lambda: self.bus.sendMessage(
            topics.HOST_WINDOW_SHOWN
        )
        self.host.on_window_entered = lambda: self.bus.sendMessage(
            topics.HOST_WINDOW_ENTERED
        )

    # Registry
    def register(self, config: Union[PanelConfig, Mapping[str, Any]]) -> PanelConfig:
        """Register a panel (see PanelRegistry.register)."""
        return self.registry.register(config)

    def get(self, name: Optional[str] = None):
        """Get one panel by name, or every panel when no name is given."""
        if name is not None:
            return self.registry.get(name)
        return self.registry.all()

    def list_panels(self) -> List[str]:
        """Names of every registered panel."""
        return self.registry.names()

    def is_panel(self, window=None) -> bool:
        """Whether a window (default: the focused one) is a panel window."""
        return self.locator.is_panel(window)

    def get_current_panel(self):
        """(window, panel) for the focused panel window, or (None, None)."""
        return self.locator.current_panel()

    # Control surface
    def open(self, name: str):
        self.controller.open(name)

    def switch(self, name: str):
        self.controller.switch(name)

    def close(self, name: str):
        self.controller.close(name)

    def toggle(self, name: str):
        self.controller.toggle(name)

    def close_side(self, edge: Union[Edge, str]):
        self.controller.close_side(edge)

    def close_side_except(self, edge: Union[Edge, str], except_name: str):
        self.controller.close_side_except(edge, except_name)

    def close_all(self):
        self.controller.close_all()

    def setup_current_window(self) -> bool:
        return self.controller.setup_current_window()

    def active_panel(self, edge: Union[Edge, str]) -> Optional[str]:
        return self.controller.active_panel(edge)

    def run_command(self, command_line: str):
        """Run a user command line such as ``SidebarToggle files``."""
        return self.commands.run(command_line)


def setup(
    host: Host,
    config: Union[SidebarConfig, Mapping[str, Any], None] = None,
    panels=None,
) -> SidebarManager:
    """Create a SidebarManager and register panels in bulk.

    Args:
        host: Windowing host
        config: SidebarConfig, or a mapping of options merged over the
            defaults; a mapping may carry the panels under ``sidebars``
        panels: Panels as a dictionary keyed by name or a list of mappings

    Returns:
        The configured SidebarManager
    """
    if config is None or isinstance(config, Mapping):
        options = dict(config or {})
        if panels is None:
            panels = options.get("sidebars")
        config = SidebarConfig.from_mapping(options)

    parsed = parse_panels(panels)
    manager = SidebarManager(host, config)
    for panel in parsed:
        manager.register(panel)

    logger.debug("Registered %d sidebar(s)", len(parsed))
    return manager
