from datetime import datetime
from typing import Optional

from sqlalchemy import String, Integer, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from .database import Base


class CalendarEvent(Base):
    """
    One calendar entry. Sessions written by the planner carry their hashtag (#work, #side, ...)
    in `notes`; everything else is an ordinary busy event.
    """
    __tablename__ = "calendar_events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    title: Mapped[str] = mapped_column(String, nullable=False)
    start_time: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    end_time: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    calendar_name: Mapped[str] = mapped_column(String, nullable=False, default="Calendar", index=True)
    notes: Mapped[Optional[str]] = mapped_column(String, nullable=True)

    def __repr__(self):
        return (f"CalendarEvent({self.id}, '{self.title}', "
                f"{self.start_time.strftime('%I:%M %p')} - {self.end_time.strftime('%I:%M %p')})")
