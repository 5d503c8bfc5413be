# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Holder for the active configuration, safe to read while a reload happens."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from .loader import read_config_file
from .types import Config

logger = logging.getLogger(__name__)


class ReadWriteLock:
    """Many concurrent readers or one writer; a waiting writer blocks new readers."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if not self._readers:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class SafeConfig:
    """
    Owns the active Config.

    ``reload`` reads and validates outside the lock and only takes the writer
    lock for the swap, so readers see either the old or the new Config.
    """

    def __init__(self, config: Config | None = None):
        self._lock = ReadWriteLock()
        self._config = config if config is not None else Config()

    @classmethod
    def from_file(cls, path: str | Path) -> "SafeConfig":
        holder = cls()
        holder.reload(path)
        return holder

    def reload(self, path: str | Path) -> Config:
        """Load ``path``; on failure raise ConfigLoadError and keep the current config."""
        config = read_config_file(path)
        with self._lock.write():
            self._config = config
        logger.info("Loaded config file %s (%d modules)", path, len(config.modules))
        return config

    def current(self) -> Config:
        with self._lock.read():
            return self._config


__all__ = ["ReadWriteLock", "SafeConfig"]
