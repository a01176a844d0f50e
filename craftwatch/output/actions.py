"""Typed actions produced by classifying one line of server output.

Every action is a frozen dataclass.  ``raw`` keeps the source line for
logging and display but does not take part in equality, so
``classify(line) == JoinAction("Alice", "1.2.3.4")`` holds for any prefix.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Union


class ActionType(str, Enum):
    JOIN = "join"
    LEAVE = "leave"
    CHAT = "chat"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class JoinAction:
    """A player connected from *address*."""

    action_type: ClassVar[ActionType] = ActionType.JOIN

    name: str
    address: str
    raw: str = field(default="", compare=False, repr=False)


@dataclass(frozen=True)
class LeaveAction:
    """A player disconnected (left the game or lost connection)."""

    action_type: ClassVar[ActionType] = ActionType.LEAVE

    name: str
    raw: str = field(default="", compare=False, repr=False)


@dataclass(frozen=True)
class ChatAction:
    action_type: ClassVar[ActionType] = ActionType.CHAT

    name: str
    message: str
    raw: str = field(default="", compare=False, repr=False)


@dataclass(frozen=True)
class UnrecognizedAction:
    """The line carried no payload from the known vocabulary."""

    action_type: ClassVar[ActionType] = ActionType.UNRECOGNIZED

    raw: str = field(default="", compare=False, repr=False)


Action = Union[JoinAction, LeaveAction, ChatAction, UnrecognizedAction]
