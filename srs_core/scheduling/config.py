"""
Configuration - Algorithm preference and environment settings

Values come from environment variables; a .env file in the working
directory is loaded on import.

Environment:
    SRS_ALGORITHM   "classic" or "fsrs" (anything else means classic)
    DATABASE_URL    SQLAlchemy URL used by the database module
"""

from __future__ import annotations

import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

ALGORITHM_ENV_VAR = "SRS_ALGORITHM"
DATABASE_URL_ENV_VAR = "DATABASE_URL"
ALGORITHM_SETTING_KEY = "srs_algorithm"


class EnvConfigStore:
    """Reads the algorithm preference from the environment on every call."""

    def __init__(self, env_var: str = ALGORITHM_ENV_VAR):
        self.env_var = env_var

    def get_algorithm_preference(self) -> Optional[str]:
        return os.getenv(self.env_var)


class StaticConfigStore:
    """Fixed algorithm preference; set_algorithm_preference swaps it."""

    def __init__(self, preference: Optional[str] = None):
        self.preference = preference

    def get_algorithm_preference(self) -> Optional[str]:
        return self.preference

    def set_algorithm_preference(self, preference: Optional[str]) -> None:
        self.preference = preference
