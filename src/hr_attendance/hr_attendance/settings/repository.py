from __future__ import annotations

from typing import Mapping, Protocol


class SettingsRepository(Protocol):
    def load_key_values(self) -> Mapping[str, str]:
        raise NotImplementedError

    def save_value(self, *, key: str, value: str) -> None:
        raise NotImplementedError
