"""
Sidebar Manager

Keeps panel windows (file trees, outlines, terminals, help, ...) docked at
the four edges of an editor, with at most one panel shown per edge.

This package provides:
- A registry of panel descriptions
- A controller opening, switching, toggling and closing panels
- Layout of panel windows (edge placement, size, options)
- A status-line indicator and user commands
- An abstract Host interface to plug in the windowing system

Example usage:
    from sidebar import setup

    manager = setup(host, {
        "left_width": 30,
        "sidebars": {
            "files": {
                "position": "left",
                "filter": lambda win: host.filetype(win) == "filetree",
                "open": "FileTreeOpen",
                "close": "FileTreeClose",
            },
            "outline": {
                "position": "left",
                "filter": lambda win: host.filetype(win) == "outline",
                "open": "OutlineOpen",
                "width": 0.25,
            },
        },
    })
    manager.toggle("files")
"""

__version__ = "0.1.0"

from .errors import SidebarError, ConfigError, UnknownPanel, CloseTimeout

from .protocol import (
    Edge,
    Command,
    Callback,
    Action,
    Predicate,
    Resolver,
    Locator,
)

from .host import Host, BufferInfo

from .config import PanelConfig, SidebarConfig, DEFAULT_OPTIONS, parse_panels

from .registry import PanelRegistry
from .locator import WindowLocator
from .layout import LayoutEngine
from .controller import ExclusivityController
from .status import StatusIndicator
from .commands import CommandDispatcher
from .help import open_last_help
from .manager import SidebarManager, setup

from . import topics

__all__ = [
    # Version
    "__version__",
    # Errors
    "SidebarError",
    "ConfigError",
    "UnknownPanel",
    "CloseTimeout",
    # Value types
    "Edge",
    "Command",
    "Callback",
    "Action",
    "Predicate",
    "Resolver",
    "Locator",
    # Host interface
    "Host",
    "BufferInfo",
    # Configuration
    "PanelConfig",
    "SidebarConfig",
    "DEFAULT_OPTIONS",
    "parse_panels",
    # Components
    "PanelRegistry",
    "WindowLocator",
    "LayoutEngine",
    "ExclusivityController",
    "StatusIndicator",
    "CommandDispatcher",
    "open_last_help",
    # Manager
    "SidebarManager",
    "setup",
    # Event topics
    "topics",
]
