"""
Application configuration read from the environment (and an optional .env file).
"""

import os
from pathlib import Path
from typing import Final

from dotenv import load_dotenv

load_dotenv()

LOG_LEVELS: Final[tuple] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Config:
    DATA_PATH: Final[Path] = Path(os.getenv("EXPENSE_PLANNER_DATA_PATH", "data/expenses.json"))
    USERS_PATH: Final[Path] = Path(os.getenv("EXPENSE_PLANNER_USERS_PATH", "data/users.json"))
    LOG_LEVEL: Final[str] = os.getenv("EXPENSE_PLANNER_LOG_LEVEL", "INFO")

    @classmethod
    def validate(cls) -> None:
        if cls.LOG_LEVEL.upper() not in LOG_LEVELS:
            raise ValueError(
                f"EXPENSE_PLANNER_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {cls.LOG_LEVEL!r}"
            )
