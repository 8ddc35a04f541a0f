from datetime import date

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field


class DayCell(BaseModel):
    """Single grid square of the contribution calendar."""

    model_config = ConfigDict(frozen=True)

    date: date
    count: int = Field(ge=0)
    in_year: bool


class MonthLabel(BaseModel):
    """First day of a month anchored to the column of its week."""

    model_config = ConfigDict(frozen=True)

    date: date
    column: int = Field(ge=0)


class CalendarGrid(BaseModel):
    """Whole-week calendar covering one year."""

    model_config = ConfigDict(frozen=True)

    year: int
    start: date
    end: date
    days: list[DayCell]
    weeks: list[date]
    months: list[MonthLabel]
    total: int = Field(ge=0)
