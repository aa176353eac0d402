"""
Exclusivity Controller

Opens, closes, switches and toggles panels so that each edge shows at
most one panel at a time.
"""

from __future__ import annotations
import logging
import time
from typing import TYPE_CHECKING, Callable, Dict, Optional, Union

from .errors import CloseTimeout
from .protocol import Edge, invoke

if TYPE_CHECKING:
    from .config import PanelConfig, SidebarConfig
    from .host import Host
    from .layout import LayoutEngine
    from .locator import WindowLocator
    from .registry import PanelRegistry

logger = logging.getLogger(__name__)


class ExclusivityController:
    """Keeps at most one panel open per edge.

    Edge state is never stored: every operation asks the locator which
    panel windows are live. Panels listed in another panel's
    ``exempt_from`` patterns may stay open next to it.

    This component subscribes to the panel command events and to the host
    bridge events. It publishes EDGE_SETTLED when an operation completes,
    and PANEL_OPENED / PANEL_CLOSED / PANEL_SETUP along the way.

    Responsibilities:
    - CMD_OPEN / CMD_SWITCH: Show a panel, closing its edge siblings
    - CMD_TOGGLE: Show a panel, or close it if it is open
    - CMD_CLOSE: Close a panel
    - CMD_CLOSE_SIDE / CMD_CLOSE_SIDE_EXCEPT / CMD_CLOSE_ALL: Bulk closing
    - HOST_WINDOW_SHOWN: Lay out panel windows opened behind our back
    - HOST_WINDOW_ENTERED: Close the tab when only panels remain
    """

    def __init__(
        self,
        bus,
        registry: "PanelRegistry",
        locator: "WindowLocator",
        layout: "LayoutEngine",
        host: "Host",
        config: "SidebarConfig",
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize exclusivity controller.

        Args:
            bus: Event bus instance (Pypubsub publisher)
            registry: Registered panels
            locator: Resolves panels to live windows
            layout: Applies panel layout
            host: Windowing host
            config: Global sidebar configuration
            clock: Monotonic clock used for the close timeout
        """
        self.bus = bus
        self.registry = registry
        self.locator = locator
        self.layout = layout
        self.host = host
        self.config = config
        self._clock = clock

        self._setup_subscriptions()

    def _setup_subscriptions(self):
        """Subscribe to command and host bridge events."""
        from . import topics

        # Command events
        self.bus.subscribe(self._on_open, topics.CMD_OPEN)
        self.bus.subscribe(self._on_switch, topics.CMD_SWITCH)
        self.bus.subscribe(self._on_toggle, topics.CMD_TOGGLE)
        self.bus.subscribe(self._on_close, topics.CMD_CLOSE)
        self.bus.subscribe(self._on_close_side, topics.CMD_CLOSE_SIDE)
        self.bus.subscribe(
            self._on_close_side_except, topics.CMD_CLOSE_SIDE_EXCEPT
        )
        self.bus.subscribe(self._on_close_all, topics.CMD_CLOSE_ALL)

        # Host bridge events
        self.bus.subscribe(self._on_window_shown, topics.HOST_WINDOW_SHOWN)
        self.bus.subscribe(self._on_window_entered, topics.HOST_WINDOW_ENTERED)

    # Public operations
    def open(self, name: str):
        """Open a panel; same as switch."""
        return self.switch(name)

    def switch(self, name: str):
        """Show a panel and close the other panels on its edge.

        A panel that is already open only gets focused; its layout is left
        alone.

        Raises:
            UnknownPanel: if the panel is not registered
        """
        panel = self.registry.require(name)

        with self.layout.preserved_views(panel.edge.disturbs_views):
            found = self.locator.find_all_at_edge(panel.edge)
            target = self._close_siblings(panel, found)

            if target is not None:
                if self.host.current_window() != target:
                    self.host.set_current_window(target)
            else:
                self._open_panel(panel)

        self._settled(panel.edge, panel.name)

    def close(self, name: str):
        """Close a panel if it is open.

        Raises:
            UnknownPanel: if the panel is not registered
        """
        panel = self.registry.require(name)

        with self.layout.preserved_views(panel.edge.disturbs_views):
            window = self.locator.resolve(panel)
            if window is None:
                return
            self._close_windows(panel.edge, {window: panel.name})

        self._settled(panel.edge, self.active_panel(panel.edge))

    def toggle(self, name: str):
        """Close a panel if it is open, otherwise switch to it.

        Other panels on the edge are closed either way, unless exempt.

        Raises:
            UnknownPanel: if the panel is not registered
        """
        panel = self.registry.require(name)

        with self.layout.preserved_views(panel.edge.disturbs_views):
            found = self.locator.find_all_at_edge(panel.edge)
            target = self._close_siblings(panel, found)

            if target is not None:
                self._close_windows(panel.edge, {target: panel.name})
                active = self.active_panel(panel.edge)
            else:
                self._open_panel(panel)
                active = panel.name

        self._settled(panel.edge, active)

    def close_side(self, edge: Union[Edge, str]):
        """Close every panel at an edge."""
        self.close_side_except(edge, None)

    def close_side_except(self, edge: Union[Edge, str], except_name: Optional[str]):
        """Close every panel at an edge except ``except_name``."""
        edge = Edge.parse(edge)
        remaining = None

        with self.layout.preserved_views():
            for name in self.registry.names_at_edge(edge):
                window = self.locator.resolve(self.registry.get(name))
                if window is None:
                    continue
                if name == except_name:
                    remaining = name
                    continue
                self._close_windows(edge, {window: name})

        self._settled(edge, remaining)

    def close_all(self):
        """Close every open panel on every edge."""
        with self.layout.preserved_views():
            for edge in Edge:
                for name in self.registry.names_at_edge(edge):
                    window = self.locator.resolve(self.registry.get(name))
                    if window is not None:
                        self._close_windows(edge, {window: name})

        for edge in Edge:
            self._settled(edge, None)

    def setup_window(self, name: str, window):
        """Apply a panel's layout to a window without touching its siblings.

        Used for panel windows that appeared without going through this
        controller, e.g. a plugin opening its own window.

        Raises:
            UnknownPanel: if the panel is not registered
        """
        from . import topics

        panel = self.registry.require(name)
        self.layout.setup_window(panel, window)
        self.bus.sendMessage(
            topics.PANEL_SETUP, name=panel.name, edge=panel.edge.value
        )
        self._settled(panel.edge, panel.name)

    def setup_current_window(self) -> bool:
        """Set up the focused window if it belongs to a panel.

        Returns:
            True if the focused window was a panel window
        """
        window, panel = self.locator.current_panel()
        if panel is None:
            return False
        self.setup_window(panel.name, window)
        return True

    def close_tab_if_only_panels(self) -> bool:
        """Close the tab, or quit on the last tab, when only panels remain.

        Returns:
            True if the tab was closed
        """
        for window in self.host.list_windows():
            if not self.locator.is_panel(window):
                return False

        if self.host.tab_count() > 1:
            self.host.close_tab()
        else:
            self.host.quit_all()
        return True

    def active_panel(self, edge: Union[Edge, str]) -> Optional[str]:
        """Name of the panel shown at an edge, or None.

        When an exempt cluster is open, the focused panel is preferred,
        then the first one in registration order.
        """
        found = self.locator.find_all_at_edge(edge)
        if not found:
            return None
        current = self.host.current_window()
        if current in found:
            return found[current]
        return next(iter(found.values()))

    # Internals
    def _close_siblings(self, panel: "PanelConfig", found: Dict[object, str]):
        """Close the non-exempt panels in ``found`` other than ``panel``.

        Returns:
            The live window of ``panel`` itself, or None
        """
        target = None
        closing = {}
        for window, name in found.items():
            if name == panel.name:
                target = window
            elif not panel.exempts(name):
                closing[window] = name
            else:
                logger.debug("Keeping %s open next to %s", name, panel.name)

        self._close_windows(panel.edge, closing)
        return target

    def _close_windows(self, edge: Edge, closing: Dict[object, str]):
        """Close panel windows one by one, waiting for each to disappear."""
        from . import topics

        if not closing:
            return

        # Move focus away from windows about to close
        if self.host.current_window() in closing:
            self.host.focus_previous()

        for window, name in closing.items():
            panel = self.registry.get(name)
            logger.debug("Closing sidebar %s at %s", name, edge.value)
            if panel.close_action is not None:
                invoke(panel.close_action, self.host)
            elif self.host.is_window_valid(window):
                self.host.close_window(window)

            self._wait_for_close(edge, name)
            self.bus.sendMessage(topics.PANEL_CLOSED, name=name, edge=edge.value)

    def _wait_for_close(self, edge: Edge, name: str):
        """Poll until ``name`` has no live window at ``edge``.

        Yields to the host between polls. Waits forever unless a close
        timeout is configured.

        Raises:
            CloseTimeout: if the panel is still open after close_timeout
        """
        timeout = self.config.close_timeout
        deadline = None if timeout is None else self._clock() + timeout

        while name in self.locator.find_all_at_edge(edge).values():
            if deadline is not None and self._clock() >= deadline:
                raise CloseTimeout(edge.value, [name], timeout)
            self.host.pause(self.config.poll_interval)

    def _open_panel(self, panel: "PanelConfig"):
        """Run a panel's open action, then focus and lay out its window."""
        from . import topics

        logger.debug("Opening sidebar %s at %s", panel.name, panel.edge.value)
        invoke(panel.open_action, self.host)

        window = self.locator.resolve(panel)
        if window is not None:
            if self.host.current_window() != window:
                self.host.set_current_window(window)
            self.layout.setup_window(panel, window)
        else:
            logger.debug("Sidebar %s opened no window yet", panel.name)

        self.bus.sendMessage(
            topics.PANEL_OPENED, name=panel.name, edge=panel.edge.value
        )

    def _settled(self, edge: Edge, name: Optional[str]):
        """Publish the panel shown at an edge once an operation completes."""
        from . import topics

        self.bus.sendMessage(topics.EDGE_SETTLED, edge=edge.value, panel=name)

    # Command event handlers
    def _on_open(self, name):
        """Handle CMD_OPEN command."""
        self.open(name)

    def _on_switch(self, name):
        """Handle CMD_SWITCH command."""
        self.switch(name)

    def _on_toggle(self, name):
        """Handle CMD_TOGGLE command."""
        self.toggle(name)

    def _on_close(self, name):
        """Handle CMD_CLOSE command."""
        self.close(name)

    def _on_close_side(self, edge):
        """Handle CMD_CLOSE_SIDE command."""
        self.close_side(edge)

    def _on_close_side_except(self, edge, name):
        """Handle CMD_CLOSE_SIDE_EXCEPT command."""
        self.close_side_except(edge, name)

    def _on_close_all(self):
        """Handle CMD_CLOSE_ALL command."""
        self.close_all()

    # Host bridge handlers
    def _on_window_shown(self):
        """Handle HOST_WINDOW_SHOWN event."""
        if self.locator.is_panel():
            self.setup_current_window()

    def _on_window_entered(self):
        """Handle HOST_WINDOW_ENTERED event."""
        if self.config.close_tab_on_closing_last_buffer:
            self.close_tab_if_only_panels()
