from __future__ import annotations

from typing import List

from domain.models import (
    DEFAULT_BASE_Z_INDEX,
    ActivityCluster,
    ColumnAssignment,
    PositionedActivity,
)


def compose_layout(
    cluster: ActivityCluster,
    assignment: ColumnAssignment,
    base_z_index: int = DEFAULT_BASE_Z_INDEX,
) -> List[PositionedActivity]:
    total = assignment.total_columns
    width = 1 / total
    positioned: List[PositionedActivity] = []
    for span, column in zip(cluster.spans, assignment.column_indexes):
        positioned.append(
            PositionedActivity(
                span=span,
                column_index=column,
                total_columns=total,
                left_fraction=column / total,
                width_fraction=width,
                z_index=base_z_index + column,
                is_last_in_column_set=column == total - 1,
            )
        )
    return positioned
