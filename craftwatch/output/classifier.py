"""Line classifier — raw server output to a typed action.

``classify`` is pure and total: it never raises and never looks at previous
lines, so a stream that is dropped and resumed classifies the same way.

Matching happens in two steps:

1. The log prefix is stripped.  Servers decorate lines in several ways and
   the classifier accepts any leading run of them::

       [INFO] Alice[/1.2.3.4] logged in
       2014-04-27 12:00:00 [INFO] Alice[/1.2.3.4] logged in
       [12:00:00 INFO]: Alice[/1.2.3.4:51234] logged in with entity id 7
       [12:00:00] [Server thread/INFO]: Alice left the game

   Colour escapes (ANSI and ``§x`` codes) are removed first.

2. The remaining payload is matched against the action patterns in priority
   order (join, leave, chat).  Patterns are anchored at the start of the
   payload, so ``<Bob> Alice left the game`` stays a chat line.
"""

from __future__ import annotations

import re

from craftwatch.output.actions import (
    Action,
    ActionType,
    ChatAction,
    JoinAction,
    LeaveAction,
    UnrecognizedAction,
)

_NAME = r"(?P<name>[A-Za-z0-9_.*\-]{1,32})"

_COLOR_CODES = re.compile(r"\x1b\[[0-9;]*[A-Za-z]|§[0-9a-fk-orA-FK-OR]")

_PREFIX = re.compile(
    r"""^(?:\s*(?:
        \[[^\]]*\]                          # [INFO]  [12:00:00 INFO]  [Server thread/INFO]
      | \d{4}-\d{2}-\d{2}                   # 2014-04-27
      | \d{1,2}:\d{2}:\d{2}(?:[.,]\d+)?     # 12:00:00  12:00:00.123
    ))*\s*:?\s*""",
    re.VERBOSE,
)

# (action type, pattern), checked in order, most specific first.
PATTERNS: list[tuple[ActionType, re.Pattern[str]]] = [
    (
        ActionType.JOIN,
        re.compile(
            _NAME + r"\[/(?P<address>\[[^\]]*\](?::\d+)?|[^\[\]]+)\] logged in\b"
        ),
    ),
    (
        ActionType.LEAVE,
        re.compile(_NAME + r" (?:left the game|lost connection(?::.*)?)\s*$"),
    ),
    (
        ActionType.CHAT,
        re.compile(r"<(?P<name>[^<>\s]{1,32})> (?P<message>.*)$"),
    ),
]


def strip_prefix(line: str) -> str:
    """Return the semantic payload of *line* with colour codes and log prefix removed."""
    cleaned = _COLOR_CODES.sub("", line).strip()
    return _PREFIX.sub("", cleaned, count=1)


def classify(line: str) -> Action:
    """Classify one line of server output.

    Returns ``UnrecognizedAction`` for anything outside the known vocabulary,
    including empty and non-string input.
    """
    if not isinstance(line, str):
        return UnrecognizedAction(raw=repr(line))

    payload = strip_prefix(line)
    if not payload:
        return UnrecognizedAction(raw=line)

    for action_type, pattern in PATTERNS:
        match = pattern.match(payload)
        if match is None:
            continue
        if action_type is ActionType.JOIN:
            return JoinAction(match["name"], _host(match["address"]), raw=line)
        if action_type is ActionType.LEAVE:
            return LeaveAction(match["name"], raw=line)
        return ChatAction(match["name"], match["message"].rstrip(), raw=line)

    return UnrecognizedAction(raw=line)


def _host(address: str) -> str:
    """Drop the port from a socket address as the server prints it.

    ``[::1]:51234`` and ``1.2.3.4:51234`` lose the port.  A bare IPv6
    address such as ``0:0:0:0:0:0:0:1`` has no separable port and is kept
    whole.
    """
    if address.startswith("["):
        return address[1:].partition("]")[0]
    host, sep, port = address.rpartition(":")
    if sep and port.isdigit() and ":" not in host:
        return host
    return address
