from datetime import date, datetime, time, timedelta
from typing import Set

from pydantic import BaseModel


class SearchCriteria(BaseModel):
    """All-optional filter set.

    Set fields are AND-combined. ``tags`` matches a file carrying at least one
    of the names. ``start`` is inclusive and ``end`` exclusive.
    """

    tags: Set[str] | None = None
    start: datetime | None = None
    end: datetime | None = None
    make: str | None = None
    model: str | None = None
    f_number: str | None = None
    exposure_time: str | None = None
    iso: str | None = None

    @classmethod
    def from_dates(cls, start_date: date | None = None, end_date: date | None = None, **kwargs) -> "SearchCriteria":
        """Build criteria from calendar dates, keeping the whole end day."""
        start = datetime.combine(start_date, time.min) if start_date else None
        end = datetime.combine(end_date + timedelta(days=1), time.min) if end_date else None
        return cls(start=start, end=end, **kwargs)

    def is_empty(self) -> bool:
        return not any(
            (
                self.tags,
                self.start,
                self.end,
                self.make,
                self.model,
                self.f_number,
                self.exposure_time,
                self.iso,
            )
        )
