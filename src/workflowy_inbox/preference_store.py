import logging
import tomllib
from pathlib import Path
from typing import Optional, Union

import tomli_w

logger = logging.getLogger(__name__)

DEFAULT_PATH = Path.home() / ".workflowy.inbox.toml"
KEYS = ("api_key", "save_location_url")


# ========== Persisted preferences ==========
class PreferenceStore:
    """
    Reads and writes the api key and the save location in a small toml file.
    Other keys in the file are left untouched on save, missing keys read as empty strings.
    A file that is not valid toml reads as empty and is replaced on the next save.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(path).expanduser() if path else DEFAULT_PATH

    def _read(self) -> Optional[dict]:
        """Raw file contents, None when the file is not valid toml."""
        if not self.path.exists():
            return {}
        try:
            with self.path.open("rb") as fp:
                return tomllib.load(fp)
        except tomllib.TOMLDecodeError as e:
            logger.warning("Ignoring unreadable preference file %s: %s", self.path, e)
            return None

    def load(self) -> dict:
        data = self._read() or {}
        return {k: str(data[k]) for k in KEYS if data.get(k) is not None}

    def save(self, **values: str) -> Path:
        unknown = set(values) - set(KEYS)
        if unknown:
            raise KeyError(f"Unknown preference: {', '.join(sorted(unknown))}")
        data = self._read()
        if data is None:
            logger.warning("Overwriting unreadable preference file %s", self.path)
            data = {}
        data.update({k: v for k, v in values.items() if v is not None})
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("wb") as fp:
            tomli_w.dump(data, fp)
        try:
            self.path.chmod(0o600)
        except OSError:
            logger.debug("Could not restrict permissions on %s", self.path)
        logger.debug("Preferences saved to %s", self.path)
        return self.path

    def ensure(self) -> Path:
        """Create the file with empty values so it can be opened in an editor."""
        if not self.path.exists():
            self.save(**{k: "" for k in KEYS})
        return self.path
