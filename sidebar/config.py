"""
Sidebar Configuration

Panel descriptions and global settings, plus parsers for the plain
mapping form used by bulk setup.
"""

from __future__ import annotations
import re
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from .errors import ConfigError
from .protocol import (
    Action,
    Edge,
    Locator,
    Predicate,
    Resolver,
    as_action,
)


DEFAULT_OPTIONS: Dict[str, Any] = {
    "winfixwidth": False,
    "winfixheight": False,
    "number": False,
    "foldcolumn": "0",
    "signcolumn": "no",
    "colorcolumn": "0",
    "bufhidden": "hide",
    "buflisted": False,
}


def _check_size(value, what: str):
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{what} must be a number, got {value!r}")
    if value <= 0:
        raise ConfigError(f"{what} must be positive, got {value!r}")


@dataclass(frozen=True)
class PanelConfig:
    """Declarative description of a panel.

    ``exempt_from`` holds regular expressions (Python ``re`` dialect,
    unanchored search) matched against the names of other panels on the
    same edge; matching panels are left open when this one is opened.
    """

    name: str
    edge: Edge
    locator: Locator
    open_action: Action
    close_action: Optional[Action] = None
    size: Optional[float] = None
    move: Optional[bool] = None
    options: Mapping[str, Any] = field(default_factory=dict)
    exempt_from: Tuple[str, ...] = ()
    icon: Optional[str] = None

    def __post_init__(self):
        if not self.name or not isinstance(self.name, str):
            raise ConfigError("Sidebar description must include a name")
        if self.edge is None:
            raise ConfigError(f"Sidebar {self.name} must include a position")
        try:
            object.__setattr__(self, "edge", Edge.parse(self.edge))
        except ValueError:
            raise ConfigError(
                f"Sidebar {self.name} has unknown position {self.edge!r}"
            ) from None

        if not isinstance(self.locator, (Predicate, Resolver)):
            if not callable(self.locator):
                raise ConfigError(f"Sidebar {self.name} has no window locator")
            object.__setattr__(self, "locator", Predicate(self.locator))

        try:
            object.__setattr__(self, "open_action", as_action(self.open_action))
            if self.close_action is not None:
                object.__setattr__(
                    self, "close_action", as_action(self.close_action)
                )
        except TypeError as e:
            raise ConfigError(f"Sidebar {self.name}: {e}") from None

        _check_size(self.size, f"Sidebar {self.name} size")

        patterns = self.exempt_from
        if isinstance(patterns, str):
            patterns = (patterns,)
        patterns = tuple(patterns or ())
        for pattern in patterns:
            try:
                re.compile(pattern)
            except re.error as e:
                raise ConfigError(
                    f"Sidebar {self.name} has invalid pattern {pattern!r}: {e}"
                ) from None
        object.__setattr__(self, "exempt_from", patterns)
        object.__setattr__(self, "options", dict(self.options or {}))

    def exempts(self, other_name: str) -> bool:
        """Whether opening this panel leaves ``other_name`` open."""
        return any(re.search(pattern, other_name) for pattern in self.exempt_from)

    @classmethod
    def from_mapping(
        cls, attrs: Mapping[str, Any], name: Optional[str] = None
    ) -> "PanelConfig":
        """Build a panel from its mapping form.

        Args:
            attrs: Keys ``position`` (or ``edge``), ``filter``/``check_win``
                or ``get_win``, ``open``, ``close``, ``size``/``width``/
                ``height``, ``move``, ``opts``, ``dont_close``, ``icon``
            name: Panel name from the dictionary key; overrides any
                ``name`` inside ``attrs``
        """
        if name is None:
            name = attrs.get("name")
        if not name:
            raise ConfigError("Sidebar description must include a name")

        edge = attrs.get("edge", attrs.get("position"))
        if edge is None:
            raise ConfigError(f"Sidebar {name} must include a position")

        if attrs.get("get_win") is not None:
            locator: Locator = Resolver(attrs["get_win"])
        elif attrs.get("filter") is not None:
            locator = Predicate(attrs["filter"])
        elif attrs.get("check_win") is not None:
            locator = Predicate(attrs["check_win"])
        else:
            raise ConfigError(f"Sidebar {name} needs a filter or get_win")

        if attrs.get("open") is None:
            raise ConfigError(f"Sidebar {name} needs an open command")

        size = attrs.get("size")
        if size is None:
            try:
                vertical = Edge.parse(edge).is_vertical
            except ValueError:
                vertical = True
            size = attrs.get("width") if vertical else attrs.get("height")

        return cls(
            name=name,
            edge=edge,
            locator=locator,
            open_action=attrs["open"],
            close_action=attrs.get("close"),
            size=size,
            move=attrs.get("move"),
            options=attrs.get("opts") or {},
            exempt_from=attrs.get("dont_close", attrs.get("exempt_from")) or (),
            icon=attrs.get("icon"),
        )


def parse_panels(panels) -> List[PanelConfig]:
    """Parse the bulk panel configuration.

    Accepts either a dictionary (key is the panel name) or a list of
    mappings that each carry a ``name``. PanelConfig instances pass
    through unchanged.
    """
    if panels is None:
        return []
    if isinstance(panels, Mapping):
        return [
            attrs if isinstance(attrs, PanelConfig)
            else PanelConfig.from_mapping(attrs, name=name)
            for name, attrs in panels.items()
        ]

    result = []
    for attrs in panels:
        if isinstance(attrs, PanelConfig):
            result.append(attrs)
        elif not attrs.get("name"):
            raise ConfigError(
                'Sidebar config in array format must include a "name" field'
            )
        else:
            result.append(PanelConfig.from_mapping(attrs))
    return result


@dataclass
class SidebarConfig:
    """Global sidebar configuration."""

    # Default sizes: cells if >= 1, otherwise a fraction of the surface
    left_width: float = 40
    right_width: float = 40
    top_height: float = 0.4
    bottom_height: float = 0.4

    # Move panels to their edge when they are set up
    move: bool = True

    # Default options applied to every panel window and buffer
    opts: Dict[str, Any] = field(default_factory=lambda: dict(DEFAULT_OPTIONS))

    # Close the tab (or quit) when only panels remain in it
    close_tab_on_closing_last_buffer: bool = False

    # Status indicator: False, True, or a mapping of StatusIndicator settings
    statusline: Union[bool, Mapping[str, Any]] = False

    # Close polling
    poll_interval: float = 0.03
    close_timeout: Optional[float] = None

    # Key installed on panel buffers that have no mapping for it
    close_key: str = "q"
    close_key_action: str = "<C-w>q"

    def __post_init__(self):
        """Validate sizes and timing values."""
        for edge in Edge:
            _check_size(self.default_size(edge), f"{edge.value} default size")
        if self.poll_interval <= 0:
            raise ConfigError("poll_interval must be positive")
        if self.close_timeout is not None and self.close_timeout <= 0:
            raise ConfigError("close_timeout must be positive")
        self.opts = dict(self.opts)

    def default_size(self, edge: Edge) -> float:
        """Default size for panels on an edge."""
        return {
            Edge.LEFT: self.left_width,
            Edge.RIGHT: self.right_width,
            Edge.TOP: self.top_height,
            Edge.BOTTOM: self.bottom_height,
        }[edge]

    @property
    def statusline_enabled(self) -> bool:
        return self.statusline is not None and self.statusline is not False

    @classmethod
    def from_mapping(cls, opts: Optional[Mapping[str, Any]] = None) -> "SidebarConfig":
        """Build a configuration from user options merged over the defaults.

        ``opts`` entries are merged into the default option set rather than
        replacing it. The ``sidebars`` key is ignored (see parse_panels).
        """
        opts = dict(opts or {})
        opts.pop("sidebars", None)

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(opts) - known)
        if unknown:
            raise ConfigError(f"Unknown sidebar option(s): {', '.join(unknown)}")

        window_opts = dict(DEFAULT_OPTIONS)
        window_opts.update(opts.pop("opts", None) or {})
        return cls(opts=window_opts, **opts)


def merge_options(*layers: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Merge option mappings, later layers winning."""
    merged: Dict[str, Any] = {}
    for layer in layers:
        if layer:
            merged.update(layer)
    return merged

