"""
Local key/value storage for the extension (chrome.storage.local equivalent).

The whole store is one JSON document. Writes replace it wholesale, so the
last writer wins.
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Union


class MemoryStorage:
    """Non-persistent storage, for tests and one-off scripts."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = dict(initial or {})

    def read(self) -> Dict[str, Any]:
        return dict(self._data)

    def write(self, data: Dict[str, Any]) -> None:
        self._data = dict(data)

    def get(self, key: str, default: Any = None) -> Any:
        return self.read().get(key, default)

    def set(self, **items: Any) -> None:
        data = self.read()
        data.update(items)
        self.write(data)

    def remove(self, keys: Iterable[str]) -> None:
        data = self.read()
        for key in keys:
            data.pop(key, None)
        self.write(data)


class JSONFileStorage(MemoryStorage):
    """Storage backed by a JSON file on disk."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except json.JSONDecodeError as e:
            print(f"[Storage] Ignoring unreadable {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def write(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")
