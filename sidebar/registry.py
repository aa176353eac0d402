"""
Panel Registry

Stores panel descriptions by name and keeps an index of the panels
registered at each edge.
"""

from __future__ import annotations
import logging
from typing import Dict, List, Mapping, Optional, Union

from .config import PanelConfig
from .errors import ConfigError, UnknownPanel
from .protocol import Edge

logger = logging.getLogger(__name__)


class PanelRegistry:
    """Registered panels and the per-edge index.

    Registering an existing name replaces its description (last write
    wins). The edge index only grows: it lists names in the order they
    first appeared at an edge, and entries whose panel has since moved to
    another edge are skipped on lookup.
    """

    def __init__(self):
        self._panels: Dict[str, PanelConfig] = {}
        self._edge_index: Dict[Edge, List[str]] = {edge: [] for edge in Edge}

    def register(self, config: Union[PanelConfig, Mapping]) -> PanelConfig:
        """Insert or replace a panel.

        Args:
            config: A PanelConfig or its mapping form

        Returns:
            The registered PanelConfig

        Raises:
            ConfigError: if the name or edge is missing or invalid
        """
        if not isinstance(config, PanelConfig):
            if not isinstance(config, Mapping):
                raise ConfigError(f"Invalid sidebar description: {config!r}")
            config = PanelConfig.from_mapping(config)

        if config.name in self._panels:
            logger.debug("Replacing sidebar %s", config.name)

        self._panels[config.name] = config
        names = self._edge_index[config.edge]
        if config.name not in names:
            names.append(config.name)
        return config

    def get(self, name: str) -> Optional[PanelConfig]:
        """Get a panel by name, or None if it is not registered."""
        return self._panels.get(name)

    def require(self, name: str) -> PanelConfig:
        """Get a panel by name.

        Raises:
            UnknownPanel: if no panel has this name
        """
        panel = self._panels.get(name)
        if panel is None:
            raise UnknownPanel(name)
        return panel

    def all(self) -> List[PanelConfig]:
        """Snapshot of every registered panel."""
        return list(self._panels.values())

    def names(self) -> List[str]:
        """Names of every registered panel."""
        return list(self._panels)

    def names_at_edge(self, edge: Union[Edge, str]) -> List[str]:
        """Names registered at an edge, in registration order."""
        edge = Edge.parse(edge)
        return [
            name
            for name in self._edge_index[edge]
            if self._panels[name].edge == edge
        ]

    def __contains__(self, name) -> bool:
        return name in self._panels

    def __len__(self) -> int:
        return len(self._panels)
