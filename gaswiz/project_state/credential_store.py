from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

CREDENTIAL_KEY = "GEMINI_API_KEY"
ENV_KEYS = ("API_KEY", "GEMINI_API_KEY")


class CredentialStore:
    """
    Single-slot key-value file holding the wizard's own Gemini API key.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        return json.loads(self.path.read_text(encoding="utf-8") or "{}")

    def _write(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    def load(self) -> Optional[str]:
        value = self._read().get(CREDENTIAL_KEY)
        return value or None

    def save(self, value: str) -> None:
        if not value or not value.strip():
            raise ValueError("Refusing to save an empty API key")
        data = self._read()
        data[CREDENTIAL_KEY] = value.strip()
        self._write(data)

    def clear(self) -> None:
        data = self._read()
        if data.pop(CREDENTIAL_KEY, None) is not None:
            self._write(data)


def resolve_api_key(
    store: CredentialStore, env: Optional[Mapping[str, str]] = None
) -> Optional[str]:
    # an injected environment value wins over the persisted one
    env = os.environ if env is None else env
    for key in ENV_KEYS:
        value = env.get(key)
        if value and value.strip():
            return value.strip()
    return store.load()
