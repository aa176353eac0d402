"""
Sidebar Value Types

Edges, open/close actions and window locators shared by the registry,
the locator and the controller.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Union

if TYPE_CHECKING:
    from .host import Host


class Edge(Enum):
    """Docking edge of the editing surface."""

    LEFT = "left"
    RIGHT = "right"
    TOP = "top"
    BOTTOM = "bottom"

    @property
    def is_vertical(self) -> bool:
        """Whether panels on this edge are sized by width."""
        return self in (Edge.LEFT, Edge.RIGHT)

    @property
    def disturbs_views(self) -> bool:
        """Whether opening or closing here can shift other windows' viewports."""
        return self in (Edge.TOP, Edge.BOTTOM)

    @classmethod
    def parse(cls, value: Union["Edge", str]) -> "Edge":
        """Convert a string such as ``"left"`` to an Edge.

        Raises:
            ValueError: if the value names no edge
        """
        if isinstance(value, Edge):
            return value
        return cls(str(value).lower())


@dataclass(frozen=True)
class Command:
    """An action passed verbatim to the host command interpreter."""

    text: str


@dataclass(frozen=True)
class Callback:
    """An action implemented by a Python callable."""

    fn: Callable[[], Any]


Action = Union[Command, Callback]


def as_action(value) -> Action:
    """Wrap a command string or a callable into an Action."""
    if isinstance(value, (Command, Callback)):
        return value
    if isinstance(value, str):
        return Command(value)
    if callable(value):
        return Callback(value)
    raise TypeError(f"Expected a command string or callable, got {type(value)}")


def invoke(action: Action, host: "Host"):
    """Run an action against the host."""
    if isinstance(action, Command):
        return host.run_command(action.text)
    return action.fn()


@dataclass(frozen=True)
class Predicate:
    """Locates a panel by testing every window in the current view."""

    fn: Callable[[Any], bool]


@dataclass(frozen=True)
class Resolver:
    """Locates a panel directly.

    ``source`` is either a callable returning the window (or None), or an
    expression string evaluated by the host.
    """

    source: Union[Callable[[], Any], str]

    def resolve(self, host: "Host"):
        if isinstance(self.source, str):
            return host.evaluate(self.source) or None
        return self.source()


Locator = Union[Predicate, Resolver]
