"""Object-store key derivation."""

from __future__ import annotations

import time
from typing import Callable, Optional
from uuid import uuid4


def derive_key(folder: str, filename: str, disambiguator: str) -> str:
    """Return ``<folder>/<disambiguator>-<filename>``.

    Pure: the same inputs always give the same key. Directory components of
    ``filename`` are dropped so a client cannot escape ``folder``.
    """

    return f"{folder.strip('/')}/{disambiguator}-{_basename(filename)}"


class KeyDeriver:
    """Produces collision-free keys for back-to-back uploads.

    The disambiguator is the wall-clock millisecond followed by eight random
    hex characters, so two identical filenames in the same millisecond (or in
    two processes) still get distinct keys.
    """

    def __init__(
        self,
        *,
        clock: Callable[[], float] = time.time,
        token_factory: Optional[Callable[[], str]] = None,
    ):
        self._clock = clock
        self._token_factory = token_factory or (lambda: uuid4().hex[:8])

    def next_disambiguator(self) -> str:
        millis = int(self._clock() * 1000)
        return f"{millis}-{self._token_factory()}"

    def key_for(self, folder: str, filename: str) -> str:
        return derive_key(folder, filename, self.next_disambiguator())


def _basename(filename: str) -> str:
    name = filename.replace("\\", "/").rsplit("/", 1)[-1].strip()
    if name in {"", ".", ".."}:
        return "file"
    return name
