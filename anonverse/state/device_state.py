"""
Device-local flags.

The guest-mode flag lives in a small JSON document on the device, under its
own key (``settings.GUEST_FLAG_KEY``) and separate from any session-token
storage. The value is re-read on every access so several clients sharing a
device see each other's changes, and so tier resolution always works from
the stored value.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Union

from anonverse.database.config.config import settings

logger = logging.getLogger(__name__)


class LocalDeviceState:
    """
    JSON-file backed key/value store for device flags.

    Parameters
    ----------
    path : Path | str, optional
        Location of the JSON document. Defaults to `settings.DEVICE_STATE_PATH`.
    guest_key : str, optional
        Key of the guest flag. Defaults to `settings.GUEST_FLAG_KEY`.
    """

    def __init__(self, path: Optional[Union[Path, str]] = None, guest_key: Optional[str] = None):
        self.path = Path(path or settings.DEVICE_STATE_PATH)
        self.guest_key = guest_key or settings.GUEST_FLAG_KEY

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable device state %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring device state %s: not a JSON object", self.path)
            return {}
        return data

    def _write(self, data: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    @property
    def guest_flag(self) -> bool:
        """Current guest flag value (stored as the string "true")."""
        return self._read().get(self.guest_key) == "true"

    def set_guest_flag(self) -> None:
        data = self._read()
        data[self.guest_key] = "true"
        self._write(data)

    def clear_guest_flag(self) -> None:
        data = self._read()
        if self.guest_key in data:
            del data[self.guest_key]
            self._write(data)
