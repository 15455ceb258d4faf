"""Durable JSON storage for the game state.

The whole :class:`~radix_tribes.domain.models.GameState` (world plus
accounts) is stored as one JSON document ``{"world": ..., "users": [...]}``.
Every save first copies the current primary file to a backup path, then
writes a temporary file and atomically renames it over the primary path,
so the primary file is never observed half-written.

Saves requested through :meth:`PersistenceManager.schedule_save` are
debounced: a pending state plus one timer owned by the manager.  The first
request arms the timer; further requests inside the window only replace the
pending state.  At most one write runs at a time.
"""

from __future__ import annotations

import asyncio
import logging
import os
import shutil
import threading
from collections.abc import Callable
from contextlib import suppress
from dataclasses import dataclass
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from radix_tribes.domain.enums import LoadSource
from radix_tribes.domain.errors import PersistenceCorrupt, PersistenceWriteFailure
from radix_tribes.domain.models import GameState

logger = logging.getLogger(__name__)

STATE_ADAPTER: TypeAdapter[GameState] = TypeAdapter(GameState)


@dataclass(slots=True)
class LoadResult:
    """Loaded state and the file (or fallback) it came from."""

    state: GameState
    source: LoadSource


def encode_state(state: GameState) -> bytes:
    return STATE_ADAPTER.dump_json(state, indent=2)


def decode_state(payload: bytes | str | dict[str, object]) -> GameState:
    """Validate a JSON document (or already parsed mapping) into a GameState.

    Raises:
        PersistenceCorrupt: If the payload is not valid JSON or does not match
            the ``{world, users}`` structure.
    """

    try:
        if isinstance(payload, dict):
            return STATE_ADAPTER.validate_python(payload)
        return STATE_ADAPTER.validate_json(payload)
    except ValidationError as exc:
        raise PersistenceCorrupt(f"Invalid game data: {exc.error_count()} validation errors") from exc


class PersistenceManager:
    """Load, save and debounce-save the game state on disk."""

    def __init__(
        self,
        data_file: Path,
        backup_file: Path,
        *,
        default_factory: Callable[[], GameState],
        debounce_seconds: float = 2.0,
    ) -> None:
        self.data_file = data_file
        self.backup_file = backup_file
        self._default_factory = default_factory
        self._debounce_seconds = debounce_seconds
        self._write_lock = threading.Lock()
        self._pending: GameState | None = None
        self._timer: asyncio.TimerHandle | None = None
        self._write_task: asyncio.Task[None] | None = None
        self._closing = False

    @property
    def temp_file(self) -> Path:
        return self.data_file.with_name(self.data_file.name + ".tmp")

    @property
    def save_pending(self) -> bool:
        return self._pending is not None

    @property
    def timer_armed(self) -> bool:
        return self._timer is not None

    # --- Loading ----------------------------------------------------------------

    def _read(self, path: Path) -> GameState:
        try:
            payload = path.read_bytes()
        except OSError as exc:
            raise PersistenceCorrupt(f"Cannot read {path}: {exc}") from exc
        return decode_state(payload)

    def load(self) -> LoadResult:
        """Return the stored state, falling back to the backup, then defaults.

        Never raises.
        """

        if not self.data_file.exists():
            logger.info("no game data at %s; initializing defaults", self.data_file)
            return LoadResult(self._default_factory(), LoadSource.DEFAULT)

        try:
            state = self._read(self.data_file)
        except PersistenceCorrupt:
            logger.exception("failed to load %s; checking for backup", self.data_file)
        else:
            logger.info(
                "game data loaded: %d users, %d tribes",
                len(state.users),
                len(state.world.tribes),
            )
            return LoadResult(state, LoadSource.PRIMARY)

        if self.backup_file.exists():
            try:
                state = self._read(self.backup_file)
            except PersistenceCorrupt:
                logger.exception("failed to load backup %s; starting fresh", self.backup_file)
            else:
                logger.info("loaded game data from backup %s", self.backup_file)
                return LoadResult(state, LoadSource.BACKUP)
        else:
            logger.warning("no backup file found; starting fresh")

        return LoadResult(self._default_factory(), LoadSource.DEFAULT)

    # --- Writing ----------------------------------------------------------------

    def _write_payload(self, payload: bytes) -> None:
        with self._write_lock:
            self.data_file.parent.mkdir(parents=True, exist_ok=True)
            if self.data_file.exists():
                try:
                    shutil.copyfile(self.data_file, self.backup_file)
                except OSError:
                    logger.exception("failed to create backup %s", self.backup_file)

            tmp = self.temp_file
            try:
                with tmp.open("wb") as handle:
                    handle.write(payload)
                    handle.flush()
                    os.fsync(handle.fileno())
                os.replace(tmp, self.data_file)
            except OSError as exc:
                with suppress(OSError):
                    tmp.unlink(missing_ok=True)
                raise PersistenceWriteFailure(f"Failed to write {self.data_file}: {exc}") from exc
        logger.debug("game data saved to %s", self.data_file)

    def save(self, state: GameState) -> None:
        """Write ``state`` synchronously (backup, temp file, atomic rename).

        Raises:
            PersistenceWriteFailure: If the primary file could not be written.
        """

        self._write_payload(encode_state(state))

    # --- Debounced scheduling ---------------------------------------------------

    def schedule_save(self, state: GameState, *, immediate: bool = False) -> None:
        """Request a save of ``state``; must be called from the event loop.

        ``immediate`` skips the debounce window.  Failures are logged, never
        raised to the caller.
        """

        if self._closing:
            logger.debug("shutdown in progress; save request ignored")
            return
        self._pending = state
        if immediate:
            self._cancel_timer()
            self._start_write()
            return
        if self._timer is None:
            loop = asyncio.get_running_loop()
            self._timer = loop.call_later(self._debounce_seconds, self._on_timer)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_timer(self) -> None:
        self._timer = None
        self._start_write()

    def _start_write(self) -> None:
        if self._pending is None:
            return
        if self._write_task is not None and not self._write_task.done():
            logger.debug("save already in progress; request coalesced")
            return
        payload = encode_state(self._pending)
        self._pending = None
        loop = asyncio.get_running_loop()
        self._write_task = loop.create_task(self._write_async(payload), name="radix-save")

    async def _write_in_thread(self, payload: bytes) -> None:
        """Run one write on a daemon thread and wait for its outcome.

        Cancelling the await abandons the thread.  It is a daemon, so a hung
        write does not block interpreter exit.
        """

        loop = asyncio.get_running_loop()
        finished: asyncio.Future[None] = loop.create_future()

        def settle(error: BaseException | None) -> None:
            if finished.done():
                return
            if error is None:
                finished.set_result(None)
            else:
                finished.set_exception(error)

        def run() -> None:
            outcome: BaseException | None = None
            try:
                self._write_payload(payload)
            except BaseException as exc:
                outcome = exc
            with suppress(RuntimeError):
                loop.call_soon_threadsafe(settle, outcome)

        threading.Thread(target=run, name="radix-save", daemon=True).start()
        await finished

    async def _write_async(self, payload: bytes) -> None:
        try:
            await self._write_in_thread(payload)
        except PersistenceWriteFailure:
            logger.exception("failed to save game data; will retry on next save")
        finally:
            # Anything requested while writing goes out on the next cycle.
            if self._pending is not None and not self._closing and self._timer is None:
                loop = asyncio.get_running_loop()
                self._timer = loop.call_later(self._debounce_seconds, self._on_timer)

    async def wait_idle(self) -> None:
        """Wait for the in-flight write, if any, to finish."""

        task = self._write_task
        if task is not None and not task.done():
            await asyncio.shield(task)

    async def shutdown(self, state: GameState, *, timeout: float) -> bool:
        """Stop scheduling and perform one final save bounded by ``timeout``.

        Returns True when the final save completed.
        """

        self._closing = True
        self._cancel_timer()
        self._pending = None
        payload = encode_state(state)
        try:
            async with asyncio.timeout(timeout):
                await self.wait_idle()
                await self._write_in_thread(payload)
        except TimeoutError:
            logger.warning("final save timed out after %.1fs", timeout)
            return False
        except PersistenceWriteFailure:
            logger.exception("final save failed")
            return False
        logger.info("final save completed")
        return True
