"""
Sidebar User Commands

Maps command lines such as ``SidebarToggle files`` to command events on
the bus, and completes their arguments.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from . import topics
from .errors import SidebarError
from .protocol import Edge

if TYPE_CHECKING:
    from .registry import PanelRegistry

logger = logging.getLogger(__name__)


@dataclass
class UserCommand:
    """A user command and the event it publishes."""

    name: str
    event_topic: str
    arg_names: tuple = ()
    complete: Optional[str] = None  # "panel" or "edge"


USER_COMMANDS = [
    UserCommand("Sidebar", topics.CMD_OPEN, ("name",), "panel"),
    UserCommand("SidebarOpen", topics.CMD_OPEN, ("name",), "panel"),
    UserCommand("SidebarSwitch", topics.CMD_SWITCH, ("name",), "panel"),
    UserCommand("SidebarToggle", topics.CMD_TOGGLE, ("name",), "panel"),
    UserCommand("SidebarClose", topics.CMD_CLOSE, ("name",), "panel"),
    UserCommand("SidebarCloseSide", topics.CMD_CLOSE_SIDE, ("edge",), "edge"),
    UserCommand("SidebarCloseAll", topics.CMD_CLOSE_ALL),
]


class CommandDispatcher:
    """Runs user commands by publishing them to the event bus."""

    def __init__(self, bus, registry: "PanelRegistry"):
        """Initialize command dispatcher.

        Args:
            bus: Event bus instance (Pypubsub publisher)
            registry: Registered panels, used for completion
        """
        self.bus = bus
        self.registry = registry
        self.commands: Dict[str, UserCommand] = {c.name: c for c in USER_COMMANDS}

    def run(self, command_line: str) -> Dict[str, Any]:
        """Execute a command line.

        Returns:
            ``{"success": True}``, or ``{"success": False, "error": ...}``
        """
        parts = command_line.split()
        if not parts or parts[0] not in self.commands:
            return {"success": False, "error": f"Unknown command: {command_line}"}

        command = self.commands[parts[0]]
        args = parts[1:]
        if len(args) != len(command.arg_names):
            return {
                "success": False,
                "error": f"{command.name} takes {len(command.arg_names)} argument(s)",
            }

        logger.debug("Publishing %s for command: %s", command.event_topic, command_line)
        try:
            self.bus.sendMessage(
                command.event_topic, **dict(zip(command.arg_names, args))
            )
        except (SidebarError, ValueError) as e:
            return {"success": False, "error": str(e)}
        return {"success": True}

    def complete(self, command_name: str, arg_lead: str = "") -> List[str]:
        """Complete the argument of a command."""
        command = self.commands.get(command_name)
        if command is None or command.complete is None:
            return []

        if command.complete == "edge":
            candidates = [edge.value for edge in Edge]
        else:
            candidates = sorted(self.registry.names())
        return [c for c in candidates if c.startswith(arg_lead)]
