"""
Window Locator

Resolves panel descriptions to live host windows.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Dict, Optional, Tuple, Union

from .protocol import Edge, Resolver

if TYPE_CHECKING:
    from .config import PanelConfig
    from .host import Host
    from .registry import PanelRegistry


class WindowLocator:
    """Finds the windows that belong to registered panels.

    Nothing is cached: host window handles can be closed or reused between
    calls, so every query walks the host again.
    """

    def __init__(self, registry: "PanelRegistry", host: "Host"):
        """Initialize window locator.

        Args:
            registry: Registered panels
            host: Windowing host to query
        """
        self.registry = registry
        self.host = host

    def resolve(self, panel: "PanelConfig"):
        """Get the live window of a panel.

        Resolvers are asked directly. Predicates are tested against the
        windows of the current view in host order and the first match wins,
        so when several windows match, the one the host lists first is the
        panel's window.

        Returns:
            The window handle, or None if the panel is not open
        """
        if isinstance(panel.locator, Resolver):
            return panel.locator.resolve(self.host)

        for window in self.host.list_windows():
            if panel.locator.fn(window):
                return window
        return None

    def find_all_at_edge(self, edge: Union[Edge, str]) -> Dict[object, str]:
        """Map every live panel window at an edge to its panel name."""
        found = {}
        for name in self.registry.names_at_edge(edge):
            window = self.resolve(self.registry.get(name))
            if window is not None:
                found[window] = name
        return found

    def matches(self, panel: "PanelConfig", window) -> bool:
        """Whether a window belongs to a panel."""
        if isinstance(panel.locator, Resolver):
            return panel.locator.resolve(self.host) == window
        return bool(panel.locator.fn(window))

    def is_panel(self, window=None) -> bool:
        """Whether a window (default: the focused one) is a panel window."""
        if window is None:
            window = self.host.current_window()
        return any(self.matches(panel, window) for panel in self.registry.all())

    def current_panel(self) -> Tuple[Optional[object], Optional["PanelConfig"]]:
        """Get the panel owning the focused window.

        Returns:
            (window, panel), or (None, None) if the focused window is no panel
        """
        current = self.host.current_window()
        for panel in self.registry.all():
            if self.resolve(panel) == current:
                return current, panel
        return None, None
