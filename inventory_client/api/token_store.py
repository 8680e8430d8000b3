"""Where the bearer token lives between requests (and between runs)."""

import os
import threading
from pathlib import Path
from typing import Optional


class MemoryTokenStore:
    """Keeps the token for the lifetime of the process."""

    def __init__(self, token: Optional[str] = None):
        self._token = token
        self._lock = threading.Lock()

    def get(self) -> Optional[str]:
        with self._lock:
            return self._token

    def set(self, token: str):
        with self._lock:
            self._token = token

    def clear(self):
        with self._lock:
            self._token = None


class FileTokenStore:
    """Keeps the token in a user-only readable file.

    Every ``get`` re-reads the file so a login or logout from another
    process is picked up.
    """

    def __init__(self, path: str):
        self.path = Path(path).expanduser()
        self._lock = threading.Lock()

    def get(self) -> Optional[str]:
        with self._lock:
            try:
                token = self.path.read_text(encoding="utf-8").strip()
            except FileNotFoundError:
                return None
            return token or None

    def set(self, token: str):
        with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(token)

    def clear(self):
        with self._lock:
            try:
                self.path.unlink()
            except FileNotFoundError:
                pass
