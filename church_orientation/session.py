"""
In-memory session state

Holds the current orientation rows, the selected row and the last status.
Rows are only ever replaced as a whole set.
"""

from typing import List, Optional, Sequence

from loguru import logger

from .models import FetchStatus, OrientationRow


class OrientationSession:
    """State shared by rendering, table and export for one user session"""

    def __init__(self):
        self._rows: List[OrientationRow] = []
        self.selected_id: Optional[str] = None
        self.status = FetchStatus(level="info", message="Enter a place name or search the current bounding box.")

    @property
    def rows(self) -> List[OrientationRow]:
        return list(self._rows)

    @property
    def has_rows(self) -> bool:
        return bool(self._rows)

    def replace_rows(self, rows: Sequence[OrientationRow]) -> None:
        """Swap in a new result set; clears the selection"""
        self._rows = list(rows)
        self.selected_id = None
        logger.debug(f"Session now holds {len(self._rows)} rows")

    def find_row(self, row_id: str) -> Optional[OrientationRow]:
        """First row with this id (synthesized ids may repeat)"""
        for row in self._rows:
            if row.id == row_id:
                return row
        return None

    def select(self, row_id: Optional[str]) -> Optional[OrientationRow]:
        """Select a row by id; unknown ids clear the selection"""
        row = self.find_row(row_id) if row_id is not None else None
        self.selected_id = row.id if row is not None else None
        return row

    @property
    def selected(self) -> Optional[OrientationRow]:
        return self.find_row(self.selected_id) if self.selected_id is not None else None

    def set_status(self, level: str, message: str, count: int = 0) -> FetchStatus:
        self.status = FetchStatus(level=level, message=message, count=count)
        return self.status
