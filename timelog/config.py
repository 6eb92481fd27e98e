"""
Settings loaded from the environment (and a .env file, if present).
"""
import calendar
import os

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, field_validator

from timelog.clock import locale_first_weekday

WEEKDAYS = {name.lower(): i for i, name in enumerate(calendar.day_name)}


def parse_weekday(value) -> int:
    """Accept 0-6 (Monday = 0) or a weekday name like 'sunday'."""
    if isinstance(value, int):
        day = value
    else:
        text = str(value).strip().lower()
        if text in WEEKDAYS:
            return WEEKDAYS[text]
        try:
            day = int(text)
        except ValueError:
            raise ValueError(f"Unknown weekday: {value!r}") from None
    if not 0 <= day <= 6:
        raise ValueError(f"Weekday must be between 0 and 6, got {day}")
    return day


class Settings(BaseModel):
    database_url: str = "sqlite:///timelog.db"
    duration_goal: float = Field(default=1800.0, ge=0)  # 30 minutes
    first_weekday: int = Field(default_factory=locale_first_weekday)
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:3000"]

    @field_validator("first_weekday", mode="before")
    @classmethod
    def _weekday(cls, value):
        return parse_weekday(value)

    @field_validator("log_level")
    @classmethod
    def _level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"):
            raise ValueError(f"Unknown log level: {value!r}")
        return level

    @classmethod
    def from_env(cls, env_file: str | None = None) -> "Settings":
        """Build settings from TIMELOG_* variables; unset ones keep their defaults."""
        load_dotenv(env_file or find_dotenv(usecwd=True))
        values = {}
        if os.getenv("TIMELOG_DATABASE_URL"):
            values["database_url"] = os.environ["TIMELOG_DATABASE_URL"].strip()
        if os.getenv("TIMELOG_DURATION_GOAL"):
            values["duration_goal"] = os.environ["TIMELOG_DURATION_GOAL"].strip()
        if os.getenv("TIMELOG_WEEK_START"):
            values["first_weekday"] = os.environ["TIMELOG_WEEK_START"]
        if os.getenv("TIMELOG_LOG_LEVEL"):
            values["log_level"] = os.environ["TIMELOG_LOG_LEVEL"]
        if os.getenv("TIMELOG_CORS_ORIGINS"):
            values["cors_origins"] = [
                o.strip() for o in os.environ["TIMELOG_CORS_ORIGINS"].split(",") if o.strip()
            ]
        return cls(**values)
