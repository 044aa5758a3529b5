"""Repository sessions: resolve a reference to a working directory and clean up after it."""

import logging
import os
import shutil
import signal
import stat
import sys
import tempfile
import threading
import time
import warnings
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Iterator, Optional, Union

from git_time_machine.errors import AcquisitionError, CleanupWarning
from git_time_machine.models import RepositoryReference, Session

logger = logging.getLogger(__name__)

NAMESPACE = "git-time-machine"

# Signals that would otherwise kill the process without unwinding ``finally``.
RELEASE_SIGNALS = tuple(
    getattr(signal, name) for name in ("SIGTERM", "SIGHUP") if hasattr(signal, name)
)

Cloner = Callable[[str, Path], None]
ReferenceLike = Union[str, RepositoryReference, None]


class SessionManager:
    """Owns the working directory of a session and any temporary clone behind it.

    Local references are used in place. Remote references are cloned into
    ``<temp_root>/git-time-machine/repo-<token>`` where the token is a
    nanosecond timestamp plus a random suffix picked atomically by
    :func:`tempfile.mkdtemp`, so concurrent runs never share a directory.
    """

    def __init__(
        self,
        temp_root: Optional[Union[str, Path]] = None,
        cloner: Optional[Cloner] = None,
    ) -> None:
        root = Path(temp_root) if temp_root is not None else Path(tempfile.gettempdir())
        self.temp_root = root.absolute()
        if cloner is None:
            from git_time_machine.provider import GitDataProvider

            cloner = GitDataProvider.clone
        self._cloner = cloner

    @property
    def namespace(self) -> Path:
        """Directory that holds every temporary clone made by this tool."""
        return self.temp_root / NAMESPACE

    # ── Acquire ───────────────────────────────────────────────────────────

    def resolve(self, reference: ReferenceLike) -> Session:
        """Bind *reference* to a working directory, cloning it if it is remote.

        Raises:
            AcquisitionError: the local path is missing or the temporary
                directory could not be created.
            FetchError: the clone failed. The temporary directory has already
                been released when this propagates.
        """
        ref = RepositoryReference.parse(reference)
        if not ref.is_remote:
            return self._resolve_local(ref)

        created_ns = time.time_ns()
        directory = self._allocate(created_ns)
        session = Session(
            reference=ref,
            working_directory=directory,
            is_temporary=True,
            created=datetime.fromtimestamp(created_ns / 1e9, tz=timezone.utc),
        )
        logger.debug("Cloning %s into %s", ref.raw, directory)
        try:
            self._cloner(ref.raw, directory)
        except BaseException:
            self.release(session)
            raise
        logger.debug("Clone of %s ready", ref.raw)
        return session

    def _resolve_local(self, ref: RepositoryReference) -> Session:
        path = Path.cwd() if ref.is_empty else Path(ref.raw).expanduser().absolute()
        if not path.is_dir():
            raise AcquisitionError(f"Repository path is not a directory: {path}")
        logger.debug("Using local repository %s", path)
        return Session(reference=ref, working_directory=path, is_temporary=False)

    def _allocate(self, token: int) -> Path:
        try:
            self.namespace.mkdir(parents=True, exist_ok=True)
            return Path(tempfile.mkdtemp(prefix=f"repo-{token}-", dir=self.namespace))
        except OSError as exc:
            raise AcquisitionError(
                f"Cannot create a temporary directory under {self.namespace}: {exc}"
            ) from exc

    # ── Release ───────────────────────────────────────────────────────────

    def release(self, session: Session) -> None:
        """Remove the session's temporary clone, if it has one.

        Safe to call any number of times. Never raises: a failed removal is
        reported once as a :class:`CleanupWarning` naming the path.
        """
        if not session.is_temporary:
            return
        path = session.working_directory
        if not os.path.lexists(path):
            return
        if self.namespace not in path.parents:
            warnings.warn(
                f"Refusing to remove {path}: it is outside {self.namespace}",
                CleanupWarning,
                stacklevel=2,
            )
            return
        try:
            _force_rmtree(path)
        except OSError as exc:
            warnings.warn(
                f"Could not remove temporary clone at {path}: {exc}",
                CleanupWarning,
                stacklevel=2,
            )
            return
        logger.debug("Removed temporary clone %s", path)


@contextmanager
def session_scope(
    reference: ReferenceLike, manager: Optional[SessionManager] = None
) -> Iterator[Session]:
    """Resolve *reference* and release it on every way out of the block.

    Besides normal exit and exceptions (``KeyboardInterrupt`` included),
    SIGTERM and SIGHUP exit with ``128 + signum`` after releasing the
    session. The handlers are in place before a remote reference is cloned,
    so a signal during the clone also removes the partial checkout.
    """
    manager = manager or SessionManager()
    previous = _install_exit_handlers()
    try:
        session = manager.resolve(reference)
        try:
            yield session
        finally:
            manager.release(session)
    finally:
        _restore_handlers(previous)


def _install_exit_handlers() -> dict[int, Any]:
    # signal.signal() only works from the main thread
    if threading.current_thread() is not threading.main_thread():
        return {}
    received: list[int] = []

    def _on_signal(signum: int, _frame: object) -> None:
        # SystemExit unwinds through resolve() or the scope, both of which
        # release. Repeated signals must not interrupt that cleanup.
        if received:
            logger.debug("Signal %d ignored, already exiting on %d", signum, received[0])
            return
        received.append(signum)
        logger.debug("Signal %d received, releasing the session", signum)
        raise SystemExit(128 + signum)

    previous: dict[int, Any] = {}
    for signum in RELEASE_SIGNALS:
        previous[signum] = signal.signal(signum, _on_signal)
    return previous


def _restore_handlers(previous: dict[int, Any]) -> None:
    for signum, handler in previous.items():
        signal.signal(signum, handler if handler is not None else signal.SIG_DFL)


def _clear_readonly(func: Callable[[str], object], path: str, _exc: object) -> None:
    # git marks pack files read-only; Windows refuses to unlink those
    os.chmod(path, stat.S_IWRITE)
    func(path)


def _force_rmtree(path: Path) -> None:
    if sys.version_info >= (3, 12):
        shutil.rmtree(path, onexc=_clear_readonly)
    else:
        shutil.rmtree(path, onerror=_clear_readonly)
