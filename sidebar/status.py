"""
Sidebar Status Indicator

Renders the registered panels as a status-line segment, highlighting the
panel shown at each edge.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional, Union

from .errors import ConfigError
from .protocol import Edge

if TYPE_CHECKING:
    from .registry import PanelRegistry


class StatusIndicator:
    """Status-line segment listing panel icons.

    This component only listens: it subscribes to EDGE_SETTLED and keeps the
    last reported panel per edge. It never drives the controller.
    """

    def __init__(
        self,
        bus,
        registry: "PanelRegistry",
        separator: str = " ",
        active_format: str = "%#SidebarActive#{text}",
        inactive_format: str = "%#SidebarInactive#{text}",
        show_names: bool = False,
        default_icon: str = "\U000f0349",
        filter_position: Optional[Union[Edge, str]] = None,
    ):
        """Initialize status indicator.

        Args:
            bus: Event bus instance (Pypubsub publisher)
            registry: Registered panels (for icons and edges)
            separator: Text between panel entries
            active_format: Format for the active panel, ``{text}`` is the entry
            inactive_format: Format for the other panels
            show_names: Append the panel name to its icon
            default_icon: Icon for panels that define none
            filter_position: Only show panels at this edge
        """
        self.bus = bus
        self.registry = registry
        self.separator = separator
        self.active_format = active_format
        self.inactive_format = inactive_format
        self.show_names = show_names
        self.default_icon = default_icon
        self.filter_position = (
            Edge.parse(filter_position) if filter_position is not None else None
        )

        self.active: Dict[Edge, Optional[str]] = {edge: None for edge in Edge}
        self.current_status = ""

        self._setup_subscriptions()

    @classmethod
    def from_settings(
        cls,
        bus,
        registry: "PanelRegistry",
        settings: Optional[Mapping[str, Any]] = None,
    ) -> "StatusIndicator":
        """Create an indicator from the ``statusline`` configuration mapping."""
        try:
            return cls(bus, registry, **dict(settings or {}))
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid statusline settings: {e}") from None

    def _setup_subscriptions(self):
        """Subscribe to settle notifications."""
        from . import topics

        self.bus.subscribe(self._on_edge_settled, topics.EDGE_SETTLED)

    def _on_edge_settled(self, edge, panel):
        """Handle EDGE_SETTLED event.

        Args:
            edge: Edge name
            panel: Name of the panel shown there, or None
        """
        self.set_current(Edge.parse(edge), panel)

    def set_current(self, edge: Edge, name: Optional[str]):
        """Record the panel shown at an edge and re-render."""
        self.active[edge] = name
        self.current_status = self.render()

    def render(self) -> str:
        """Build the status text."""
        parts = []
        for panel in self.registry.all():
            if self.filter_position and panel.edge != self.filter_position:
                continue

            text = panel.icon or self.default_icon
            if self.show_names:
                text = f"{text} {panel.name}"

            if self.active.get(panel.edge) == panel.name:
                parts.append(self.active_format.format(text=text))
            else:
                parts.append(self.inactive_format.format(text=text))

        return self.separator.join(parts)

    def update_status(self) -> str:
        """Current status text; called by the status line on every redraw."""
        return self.current_status
