"""File-based session adapter."""

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class FileSession:
    """
    Session backed by a small JSON file.

    Implements Session protocol. The file is readable by the owner only.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()

    def get_token(self) -> str | None:
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text())
        except json.JSONDecodeError:
            logger.warning(f"Corrupt session file {self.path}, ignoring")
            return None
        return data.get("token") or None

    def set_token(self, token: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({"token": token}))
        self.path.chmod(0o600)

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()
            logger.info("Session cleared")
