"""OutputHandler — the seam between the server's output stream and the core.

The handler owns no player state.  It classifies each line and forwards the
resulting action to the listeners registered for that action type.  The
player registry registers itself here for join and leave actions; display
layers may listen for chat.

A producer thread can be started with :meth:`OutputHandler.start`, which
reads a text stream line by line until EOF or :meth:`OutputHandler.stop`.
Cancelling the underlying process is the caller's job; the handler simply
stops receiving lines.
"""

from __future__ import annotations

import threading
from collections import Counter
from typing import Callable, Iterable, TextIO

from craftwatch.logging import bind_context, get_logger
from craftwatch.output.actions import Action, ActionType
from craftwatch.output.classifier import classify

log = get_logger(__name__)

ActionListener = Callable[[Action], None]


class OutputHandler:
    """Classifies server output and fans the actions out to listeners."""

    def __init__(self, classifier: Callable[[str], Action] = classify) -> None:
        self._classify = classifier
        self._listeners: dict[ActionType, list[ActionListener]] = {t: [] for t in ActionType}
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self.stats: Counter[ActionType] = Counter()

    # ---------------------------------------------------------------------------
    # Listener management
    # ---------------------------------------------------------------------------

    def add_listener(self, action_type: ActionType, listener: ActionListener) -> None:
        with self._lock:
            self._listeners[action_type].append(listener)

    def remove_listener(self, action_type: ActionType, listener: ActionListener) -> bool:
        """Remove the first registration of *listener*; False if it was not registered."""
        with self._lock:
            listeners = self._listeners[action_type]
            for i, registered in enumerate(listeners):
                if registered == listener:
                    listeners.pop(i)
                    return True
        return False

    def listener_count(self, action_type: ActionType) -> int:
        with self._lock:
            return len(self._listeners[action_type])

    # ---------------------------------------------------------------------------
    # Line processing
    # ---------------------------------------------------------------------------

    def handle_line(self, line: str) -> Action:
        """Classify *line* and deliver the action to its listeners."""
        action = self._classify(line)
        with self._lock:
            self.stats[action.action_type] += 1
            listeners = list(self._listeners[action.action_type])

        for listener in listeners:
            try:
                listener(action)
            except Exception as exc:
                log.error(
                    "action_listener_error",
                    action_type=action.action_type.value,
                    listener=getattr(listener, "__qualname__", repr(listener)),
                    error=str(exc),
                )
        return action

    def consume(self, lines: Iterable[str]) -> int:
        """Handle every line of *lines*; return how many were processed."""
        count = 0
        for line in lines:
            if self._stop_event.is_set():
                break
            self.handle_line(line.rstrip("\r\n"))
            count += 1
        return count

    # ---------------------------------------------------------------------------
    # Producer thread
    # ---------------------------------------------------------------------------

    def start(self, stream: TextIO, name: str = "server-output") -> threading.Thread:
        """Read *stream* on a daemon thread until EOF or :meth:`stop`."""
        if self.is_running:
            raise RuntimeError("OutputHandler is already reading a stream")
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._read_loop, args=(stream, name), name=name, daemon=True
        )
        self._thread.start()
        log.debug("output_reader_started", source=name)
        return self._thread

    def stop(self, timeout: float | None = None) -> None:
        """Ask the reader thread to stop after the current line and wait for it."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _read_loop(self, stream: TextIO, name: str) -> None:
        bind_context(source=name)
        try:
            processed = self.consume(stream)
        except (OSError, ValueError) as exc:
            # ValueError: the stream was closed underneath us.
            log.warning("output_stream_closed", source=name, error=str(exc))
            return
        log.debug("output_reader_finished", source=name, lines=processed)
