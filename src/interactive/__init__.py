"""Interactive terminal browser over a release catalog."""

from .controller import Controller
from .state import KEYMAP, Action, FetchCompleted, InteractiveViewState, KeyPressed, Screen

__all__ = [
    "Action",
    "Controller",
    "FetchCompleted",
    "InteractiveViewState",
    "KEYMAP",
    "KeyPressed",
    "Screen",
]
