"""Backup, substitution and restore of the files used by the command."""

import logging
import os
import shutil
import signal
from collections.abc import Iterable
from pathlib import Path
from types import FrameType, TracebackType
from typing import Any, Optional

from env_deploy.exceptions import CommandAborted
from env_deploy.template_engines.base import BaseEngine

_LOG = logging.getLogger(__name__)
BACKUP_SUFFIX = ".env-deploy"
SIGNALS = [
    getattr(signal, name)
    for name in ("SIGHUP", "SIGINT", "SIGQUIT", "SIGABRT", "SIGTERM")
    if hasattr(signal, name)
]


def backup_path(path: str | Path) -> Path:
    """Get the hidden sibling where the original content of a file is kept."""
    path = Path(path)
    return path.with_name(f".{path.name}{BACKUP_SUFFIX}")


class FileTransaction:
    """
    Substitute files in place and put back their original content afterwards.

    Used as a context manager the original files are restored on every exit path, including
    the termination signals, which are turned into a ``CommandAborted`` exception.
    """

    def __init__(self, paths: Iterable[str | Path], engine: BaseEngine) -> None:
        self._paths = [Path(path) for path in paths]
        self._engine = engine
        self._begun: list[Path] = []
        self._previous_handlers: dict[int, Any] = {}

    def begin(self) -> None:
        """Move all the files to their backup, restoring the already moved ones on failure."""
        for path in self._paths:
            backup = backup_path(path)
            try:
                if os.path.lexists(backup):
                    raise FileExistsError(
                        f"The backup {backup} already exists, restore or remove it before running again"
                    )
                _LOG.debug("Backup %s -> %s", path, backup)
                # Tracked before the rename so a signal in between can't lose the file
                self._begun.append(path)
                try:
                    os.rename(path, backup)
                except OSError:
                    self._begun.pop()
                    raise
            except OSError:
                _LOG.error("Cannot backup the file %s", path)
                self._ignore_signals()
                self.end()
                raise

    def substitute(self, path: str | Path) -> bytes:
        """Write the substituted content of the backup to the original path."""
        path = Path(path)
        backup = backup_path(path)
        content = self._engine.substitute_file(backup, path)
        shutil.copymode(backup, path)
        return content

    def substitute_all(self) -> dict[Path, bytes]:
        return {path: self.substitute(path) for path in self._begun}

    def end(self) -> None:
        """Put back the original files, each one only once."""
        while self._begun:
            path = self._begun.pop()
            backup = backup_path(path)
            if not os.path.lexists(backup):
                _LOG.warning("No backup to restore for %s", path)
                continue
            _LOG.debug("Restore %s -> %s", backup, path)
            os.replace(backup, path)

    def __enter__(self) -> "FileTransaction":
        self._install_handlers()
        try:
            self.begin()
        except BaseException:
            self._ignore_signals()
            try:
                self.end()
            finally:
                self._restore_handlers()
            raise
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc_value: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        self._ignore_signals()
        try:
            self.end()
        finally:
            self._restore_handlers()

    def _install_handlers(self) -> None:
        for signum in SIGNALS:
            self._previous_handlers[signum] = signal.signal(signum, _abort)

    def _ignore_signals(self) -> None:
        # A second signal must not interrupt the restore
        for signum in self._previous_handlers:
            signal.signal(signum, signal.SIG_IGN)

    def _restore_handlers(self) -> None:
        for signum, handler in self._previous_handlers.items():
            signal.signal(signum, signal.SIG_DFL if handler is None else handler)
        self._previous_handlers.clear()


def _abort(signum: int, frame: Optional[FrameType]) -> None:
    del frame
    name = signal.Signals(signum).name
    _LOG.info("Got a %s, restoring the files", name)
    raise CommandAborted(f"Got a {name}")

