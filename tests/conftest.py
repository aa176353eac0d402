"""
Shared pytest fixtures for sidebar tests.
"""

import pytest
from pubsub.core import Publisher

from sidebar.config import PanelConfig, SidebarConfig
from sidebar.host import BufferInfo, Host
from sidebar.protocol import Callback, Predicate


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests against the fake host")


@pytest.fixture
def bus():
    """Fresh event bus for each test."""
    return Publisher()


class FakeClock:
    """Monotonic clock advanced by FakeHost.pause."""

    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class FakeHost(Host):
    """In-memory windowing host.

    Windows are integers. Closing can be delayed by a number of pauses to
    mimic panels that close asynchronously.
    """

    WINDOW_OPTIONS = {"winfixwidth", "winfixheight", "number", "foldcolumn",
                      "signcolumn", "colorcolumn", "wrap"}
    BUFFER_OPTIONS = {"bufhidden", "buflisted", "filetype"}

    def __init__(self, clock, columns=120, lines=50):
        super().__init__()
        self.clock = clock
        self._columns = columns
        self._lines = lines
        self._next_id = 1000
        self.windows = {}
        self.order = []
        self.current = self.new_window("main")
        self.previous = None
        self.buffers = []
        self.expressions = {}
        self.command_handlers = {}
        self.commands_run = []
        self.close_delays = {}
        self.pending_closes = {}
        self.closed = []
        self.pauses = 0
        self.focus_previous_calls = 0
        self._stable_split = False
        self.tabs = 1
        self.tabs_closed = 0
        self.quit_called = False

    # Test helpers
    def new_window(self, filetype, focus=False):
        win = self._next_id
        self._next_id += 1
        self.windows[win] = {
            "filetype": filetype,
            "width": 80,
            "height": 20,
            "edge": None,
            "win_opts": {},
            "buf_opts": {},
            "mappings": {},
            "view": {"topline": 1, "cursor": (1, 0)},
        }
        self.order.append(win)
        if focus:
            self.set_current_window(win)
        return win

    def filetype(self, win):
        return self.windows[win]["filetype"] if win in self.windows else None

    def windows_of(self, filetype):
        return [w for w in self.order if self.windows[w]["filetype"] == filetype]

    def _remove(self, win):
        if win not in self.windows:
            return
        del self.windows[win]
        self.order.remove(win)
        self.closed.append(win)
        if self.current == win:
            self.current = self.previous if self.previous in self.windows else self.order[0]

    # Host interface
    def list_windows(self):
        return list(self.order)

    def list_buffers(self):
        return list(self.buffers)

    def is_window_valid(self, window):
        return window in self.windows

    def current_window(self):
        return self.current

    def set_current_window(self, window):
        if window not in self.windows:
            raise ValueError(f"Invalid window id: {window}")
        if window != self.current:
            self.previous = self.current
            self.current = window

    def focus_previous(self):
        self.focus_previous_calls += 1
        if self.previous in self.windows:
            self.set_current_window(self.previous)

    @property
    def columns(self):
        return self._columns

    @property
    def lines(self):
        return self._lines

    def set_width(self, window, width):
        self.windows[window]["width"] = width

    def set_height(self, window, height):
        self.windows[window]["height"] = height

    def move_to_edge(self, window, edge):
        self.set_current_window(window)
        self.windows[window]["edge"] = edge
        # Other windows scroll when a split moves
        for other in self.windows.values():
            other["view"] = {"topline": 99, "cursor": (99, 0)}

    def close_window(self, window):
        delay = self.close_delays.get(self.filetype(window), 0)
        if delay:
            self.pending_closes[window] = delay
        else:
            self._remove(window)

    def set_window_option(self, window, name, value):
        if name not in self.WINDOW_OPTIONS:
            raise KeyError(f"Unknown window option: {name}")
        self.windows[window]["win_opts"][name] = value

    def set_buffer_option(self, window, name, value):
        if name not in self.BUFFER_OPTIONS:
            raise KeyError(f"Unknown buffer option: {name}")
        self.windows[window]["buf_opts"][name] = value

    def has_mapping(self, window, lhs):
        return lhs in self.windows[window]["mappings"]

    def set_mapping(self, window, lhs, rhs):
        self.windows[window]["mappings"][lhs] = rhs

    @property
    def stable_split(self):
        return self._stable_split

    def save_view(self, window):
        return dict(self.windows[window]["view"])

    def restore_view(self, window, view):
        self.windows[window]["view"] = dict(view)

    def run_command(self, command):
        self.commands_run.append(command)
        handler = self.command_handlers.get(command)
        if handler is not None:
            handler()

    def evaluate(self, expression):
        return self.expressions[expression]()

    def pause(self, seconds):
        self.pauses += 1
        self.clock.now += seconds
        for win in list(self.pending_closes):
            self.pending_closes[win] -= 1
            if self.pending_closes[win] <= 0:
                del self.pending_closes[win]
                self._remove(win)

    def tab_count(self):
        return self.tabs

    def close_tab(self):
        self.tabs_closed += 1

    def quit_all(self):
        self.quit_called = True


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def host(clock):
    return FakeHost(clock)


@pytest.fixture
def other_host():
    """Second host with its own clock."""
    return FakeHost(FakeClock())


@pytest.fixture
def config():
    return SidebarConfig()


@pytest.fixture
def make_panel(host):
    """Factory fixture for panels backed by FakeHost windows.

    The panel's window is the first window whose filetype equals the panel
    name; its open action creates such a window.
    """

    def factory(name, edge="left", **kwargs):
        def open_panel():
            host.new_window(name)

        kwargs.setdefault("locator", Predicate(lambda win: host.filetype(win) == name))
        kwargs.setdefault("open_action", Callback(open_panel))
        return PanelConfig(name=name, edge=edge, **kwargs)

    return factory


class EventLog:
    """Collects panel events published on the bus."""

    def __init__(self):
        self.settled = []
        self.opened = []
        self.closed = []

    def on_settled(self, edge, panel):
        self.settled.append((edge, panel))

    def on_opened(self, name, edge):
        self.opened.append(name)

    def on_closed(self, name, edge):
        self.closed.append(name)


@pytest.fixture
def events(bus):
    """Subscribe an EventLog to the panel topics."""
    from sidebar import topics

    log = EventLog()
    bus.subscribe(log.on_settled, topics.EDGE_SETTLED)
    bus.subscribe(log.on_opened, topics.PANEL_OPENED)
    bus.subscribe(log.on_closed, topics.PANEL_CLOSED)
    return log


@pytest.fixture
def help_buffers():
    return [
        BufferInfo(number=3, buftype="help", lastused=10),
        BufferInfo(number=7, buftype="", lastused=50),
        BufferInfo(number=9, buftype="help", lastused=30),
    ]
