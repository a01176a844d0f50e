"""craftwatch — Player tracking and automation for game server output.

craftwatch reads the text a game server prints, recognises player joins,
leaves and chat, keeps the list of online players, and runs tasks when that
list changes.

Architecture layers (bottom to top):
    1. Output   — line classifier and the output handler feeding it
    2. Events   — NotificationBus and QueueChannel
    3. Players  — PlayerRegistry, the single owner of player state
    4. Tasker   — triggers, tasks and the task runner
    5. Runtime  — explicit wiring of the layers above; CLI on top
"""

__version__ = "0.1.0"
__license__ = "Apache-2.0"

from craftwatch.runtime import Runtime, build_runtime

__all__ = [
    "__version__",
    "Runtime",
    "build_runtime",
]
