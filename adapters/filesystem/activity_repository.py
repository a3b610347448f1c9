from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, List

from pydantic import ValidationError

from adapters.filesystem.json_utils import load_json_records, write_json_atomic
from domain.models import Activity
from domain.ports.repositories import ActivityRepository

logger = logging.getLogger(__name__)


class FileSystemActivityRepository(ActivityRepository):
    def load_all(self, path: Path) -> List[Activity]:
        activities, _ = self.load_with_rejects(path)
        return activities

    def load_with_rejects(self, path: Path) -> tuple[List[Activity], List[tuple[int, str]]]:
        activities: List[Activity] = []
        rejected: List[tuple[int, str]] = []
        for position, record in enumerate(self.load_raw(path)):
            try:
                activity = Activity.model_validate(record)
            except ValidationError as exc:
                reason = "; ".join(
                    f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
                    for error in exc.errors()
                )
                logger.warning("Skipping activity record %s in %s: %s", position, path, reason)
                rejected.append((position, reason))
                continue
            if activities and activity.is_timezone_aware != activities[0].is_timezone_aware:
                reason = "startTime: UTC offset presence differs from earlier records"
                logger.warning("Skipping activity record %s in %s: %s", position, path, reason)
                rejected.append((position, reason))
                continue
            activities.append(activity)
        return activities, rejected

    def load_raw(self, path: Path) -> list[dict[str, Any]]:
        return load_json_records(path)

    def save_layout(self, payload: Mapping[str, Any], path: Path) -> None:
        write_json_atomic(path, dict(payload))
