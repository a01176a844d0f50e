"""Server output classification.

Quick start::

    from craftwatch.output import classify, JoinAction

    classify("[INFO] Alice[/1.2.3.4] logged in") == JoinAction("Alice", "1.2.3.4")
"""

from craftwatch.output.actions import (
    Action,
    ActionType,
    ChatAction,
    JoinAction,
    LeaveAction,
    UnrecognizedAction,
)
from craftwatch.output.classifier import classify, strip_prefix
from craftwatch.output.handler import ActionListener, OutputHandler

__all__ = [
    "Action",
    "ActionListener",
    "ActionType",
    "ChatAction",
    "JoinAction",
    "LeaveAction",
    "OutputHandler",
    "UnrecognizedAction",
    "classify",
    "strip_prefix",
]
