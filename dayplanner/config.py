import os
from typing import List

from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./dayplanner.db")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
DEFAULT_START_HOUR = int(os.getenv("DEFAULT_START_HOUR", "8"))

# Calendars whose events never block session placement (e.g. "Birthdays,Holidays")
EXCLUDED_CALENDARS: List[str] = [
    name.strip() for name in os.getenv("EXCLUDED_CALENDARS", "").split(",") if name.strip()
]
