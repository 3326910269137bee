"""Boot status broadcasting for vm-preflight."""

from __future__ import annotations

import html
from pathlib import Path
from typing import Optional

from preflight.utils import log

# Message fragment polled by the launcher's web page
STATUS_FILE = Path("/run/shm/msg.html")


class StatusBroadcaster:
    """Publish the current progress message to the file served by the webserver."""

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path or STATUS_FILE

    def update(self, msg: str) -> None:
        """Replace the status message with ``msg``."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(html.escape(msg) + "\n")
        except OSError:
            pass
        log("DEBUG", f"Status: {msg}")
