"""Debounced regeneration on file-system changes.

Each asset group gets its own :class:`ChangeWatcher`.  watchdog delivers
notifications on its observer thread; they are handed to the asyncio event
loop with ``call_soon_threadsafe`` so that the watcher state and the
generator's ``busy`` flag are only ever touched from the loop thread.

State machine::

    IDLE --qualifying event--> PENDING --delay elapsed--> REGENERATING --done--> IDLE

Events that arrive while PENDING or REGENERATING are coalesced: they neither
reset the window nor schedule another pass.
"""

from __future__ import annotations

import asyncio
import os
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import PurePath
from typing import Any

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from assetgen.errors import GeneratorError, RegenerationError
from assetgen.generator.class_gen import ClassGenerator, GenerationResult
from assetgen.utils import print_info, print_verbose, printable

DEBOUNCE_DELAY = 1.0  # seconds


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


class ChangeType(str, Enum):
    """Kind of change reported for a watched path."""
    ADD = "add"
    REMOVE = "remove"
    MODIFY = "modify"


class WatchMode(str, Enum):
    """``watch`` regenerates on any change; ``smart`` filters events first."""
    WATCH = "watch"
    SMART = "smart"


class WatchState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    REGENERATING = "regenerating"


@dataclass(frozen=True)
class ChangeEvent:
    type: ChangeType
    path: str


def translate_event(event: FileSystemEvent) -> list[ChangeEvent]:
    """Map a watchdog event onto zero or more :class:`ChangeEvent` values.

    Directory events and event kinds other than create/delete/modify/move
    are dropped.  A move is reported as a removal followed by an addition.
    """
    if event.is_directory:
        return []
    src = os.fsdecode(event.src_path)
    if event.event_type == EVENT_TYPE_CREATED:
        return [ChangeEvent(ChangeType.ADD, src)]
    if event.event_type == EVENT_TYPE_DELETED:
        return [ChangeEvent(ChangeType.REMOVE, src)]
    if event.event_type == EVENT_TYPE_MODIFIED:
        return [ChangeEvent(ChangeType.MODIFY, src)]
    if event.event_type == EVENT_TYPE_MOVED:
        dest = os.fsdecode(event.dest_path)
        return [ChangeEvent(ChangeType.REMOVE, src), ChangeEvent(ChangeType.ADD, dest)]
    return []


class _LoopForwarder(FileSystemEventHandler):
    """watchdog handler that re-dispatches events onto an asyncio loop."""

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        callback: Callable[[ChangeEvent], Any],
    ) -> None:
        super().__init__()
        self._loop = loop
        self._callback = callback

    def on_any_event(self, event: FileSystemEvent) -> None:
        for change in translate_event(event):
            self._loop.call_soon_threadsafe(self._callback, change)


# ---------------------------------------------------------------------------
# ChangeWatcher
# ---------------------------------------------------------------------------


class ChangeWatcher:
    """Watches one group's directories and regenerates its class on change.

    Attributes:
        generator: The group's generator; its ``busy`` flag gates scheduling.
        mode: ``WATCH`` or ``SMART``.
        delay: Debounce window in seconds, counted from the first
            qualifying event.
        state: Current :class:`WatchState`.
        error: The fatal error that stopped the watcher, if any.
    """

    def __init__(
        self,
        generator: ClassGenerator,
        mode: WatchMode = WatchMode.WATCH,
        delay: float = DEBOUNCE_DELAY,
        on_regenerated: Callable[[GenerationResult], None] | None = None,
        observer_factory: Callable[[], Any] = Observer,
    ) -> None:
        self.generator = generator
        self.mode = WatchMode(mode)
        self.delay = delay
        self.on_regenerated = on_regenerated
        self.state = WatchState.IDLE
        self.error: GeneratorError | None = None
        self.regenerations = 0
        self._observer_factory = observer_factory
        self._observer: Any = None
        self._task: asyncio.Task[None] | None = None
        self._done: asyncio.Future[None] | None = None

    @property
    def busy(self) -> bool:
        return self.generator.busy

    # -- Event handling ------------------------------------------------------

    def should_regenerate(self, event: ChangeEvent) -> bool:
        """Apply the smart-mode filter to *event*.

        In ``WATCH`` mode every event qualifies.  In ``SMART`` mode content
        modifications never qualify, nor do files whose extension is not in
        the group's allowed types (when any are configured).
        """
        if self.mode is not WatchMode.SMART:
            return True

        group = self.generator.group
        name = printable(PurePath(event.path).name)
        if event.type is ChangeType.MODIFY:
            print_verbose(f"{name} is modified. {group.class_name} class will not be rebuilt")
            return False
        if group.types and PurePath(event.path).suffix not in group.types:
            print_verbose(
                f"{name} does not have allowed extension for the group "
                f"{', '.join(group.paths)}. {group.class_name} class will not be rebuilt"
            )
            return False
        return True

    def handle_event(self, event: ChangeEvent) -> bool:
        """Process one change event on the event loop.

        Returns:
            ``True`` if the event scheduled a regeneration.
        """
        print_verbose(f"something changed: {event.type.value} {printable(event.path)}")
        if not self.should_regenerate(event):
            return False
        if self.generator.busy:
            print_verbose(f"Regeneration of {self.generator.group.class_name} already scheduled")
            return False

        self.generator.busy = True
        self.state = WatchState.PENDING
        self._task = asyncio.get_running_loop().create_task(self._regenerate())
        return True

    async def _regenerate(self) -> None:
        try:
            await asyncio.sleep(self.delay)
            self.state = WatchState.REGENERATING
            result = self.generator.generate()
            self.regenerations += 1
            if self.on_regenerated is not None:
                self.on_regenerated(result)
        except GeneratorError as exc:
            self._fail(exc)
        except Exception as exc:
            self._fail(
                RegenerationError(
                    f"Regeneration of {self.generator.group.class_name} failed: "
                    f"{type(exc).__name__}: {printable(exc)}",
                    cause=exc,
                )
            )
        finally:
            self.generator.busy = False
            self.state = WatchState.IDLE

    def _fail(self, exc: GeneratorError) -> None:
        self.error = exc
        if self._done is not None and not self._done.done():
            self._done.set_exception(exc)

    # -- Lifecycle -----------------------------------------------------------

    def start(self) -> None:
        """Subscribe to change notifications for every source directory."""
        loop = asyncio.get_running_loop()
        self._done = loop.create_future()

        group = self.generator.group
        print_info(f"Watching for changes in directory {', '.join(group.paths)}...")
        observer = self._observer_factory()
        handler = _LoopForwarder(loop, self.handle_event)
        for source in group.paths:
            observer.schedule(handler, str(self.generator.root / source), recursive=False)
        observer.start()
        self._observer = observer

    def stop(self) -> None:
        """Unsubscribe and drop any regeneration that has not started yet."""
        if self._observer is not None:
            self._observer.stop()
            self._observer.join()
            self._observer = None
        if self._task is not None and not self._task.done():
            self._task.cancel()
        if self._done is not None and not self._done.done():
            self._done.set_result(None)

    async def wait(self) -> None:
        """Block until :meth:`stop` is called or a regeneration fails.

        Raises:
            RuntimeError: If the watcher was never started.
            GeneratorError: The fatal error raised by a regeneration pass.
        """
        if self._done is None:
            raise RuntimeError("ChangeWatcher.wait() called before start()")
        await self._done

    async def run(self) -> None:
        """Start watching and :meth:`wait`, unsubscribing on the way out."""
        self.start()
        try:
            await self.wait()
        finally:
            self.stop()
