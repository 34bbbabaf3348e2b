"""Screens, actions, events and the mutable view state of interactive mode."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from catalog.models import Distribution
from metadata.models import DistributionMetadata


class Screen(Enum):
    LIST = "list"
    DETAIL = "detail"
    HELP = "help"
    EXITING = "exiting"


class Action(Enum):
    """What a key press asks the controller to do."""
    UP = "up"
    DOWN = "down"
    PAGE_UP = "page-up"
    PAGE_DOWN = "page-down"
    HOME = "home"
    END = "end"
    ACTIVATE = "activate"
    BACK = "back"
    NEXT_DISTRIBUTION = "next-distribution"
    PREVIOUS_DISTRIBUTION = "previous-distribution"
    MORE = "more"
    LESS = "less"
    RETRY = "retry"
    HELP = "help"
    QUIT = "quit"


# Key names as the terminal UI reports them, plus the bare characters.
KEYMAP = {
    "up": Action.UP,
    "k": Action.UP,
    "down": Action.DOWN,
    "j": Action.DOWN,
    "pageup": Action.PAGE_UP,
    "pagedown": Action.PAGE_DOWN,
    "home": Action.HOME,
    "g": Action.HOME,
    "end": Action.END,
    "G": Action.END,
    "shift+g": Action.END,
    "enter": Action.ACTIVATE,
    "l": Action.ACTIVATE,
    "right": Action.ACTIVATE,
    "escape": Action.BACK,
    "h": Action.BACK,
    "left": Action.BACK,
    "backspace": Action.BACK,
    "tab": Action.NEXT_DISTRIBUTION,
    "right_square_bracket": Action.NEXT_DISTRIBUTION,
    "]": Action.NEXT_DISTRIBUTION,
    "shift+tab": Action.PREVIOUS_DISTRIBUTION,
    "left_square_bracket": Action.PREVIOUS_DISTRIBUTION,
    "[": Action.PREVIOUS_DISTRIBUTION,
    "plus": Action.MORE,
    "+": Action.MORE,
    "minus": Action.LESS,
    "-": Action.LESS,
    "r": Action.RETRY,
    "question_mark": Action.HELP,
    "?": Action.HELP,
    "q": Action.QUIT,
    "ctrl+c": Action.QUIT,
}

# Help overlay rows: (keys, description).
KEY_HELP = (
    ("↑/k  ↓/j", "move the selection, or scroll the detail view"),
    ("PgUp  PgDn", "move by a page"),
    ("Home/g  End/G", "jump to the first or last entry"),
    ("Enter/l/→", "open the selected release"),
    ("Esc/h/←", "back to the release list"),
    ("Tab/]  Shift+Tab/[", "next or previous distribution"),
    ("+  -", "show more or fewer fields"),
    ("r", "retry a failed metadata fetch"),
    ("?", "toggle this help"),
    ("q  Ctrl+C", "quit"),
)


@dataclass
class InteractiveViewState:
    """Everything the screens need besides the catalog itself."""
    screen: Screen = Screen.LIST
    selected_release: int = 0
    selected_distribution: int = 0
    scroll_offset: int = 0
    scroll_limit: int = 0
    fetch_in_flight: bool = False
    detail_level: int = 0
    previous_screen: Optional[Screen] = None


@dataclass(frozen=True)
class KeyPressed:
    key: str


@dataclass(frozen=True)
class FetchCompleted:
    """Outcome of a background metadata fetch for one distribution."""
    distribution: Distribution
    metadata: Optional[DistributionMetadata] = None
    error: Optional[BaseException] = None
