from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Protocol

from domain.models import Activity


class ActivityRepository(Protocol):
    def load_all(self, path: Path) -> Sequence[Activity]: ...

    def load_raw(self, path: Path) -> list[dict[str, Any]]: ...

    def save_layout(self, payload: Mapping[str, Any], path: Path) -> None: ...
