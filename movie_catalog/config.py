"""
Runtime configuration.
Values come from environment variables, optionally seeded from a `.env` file
in the project root.
"""

import os  # environment access
import sys  # stderr sink for logging
from dataclasses import dataclass  # plain settings record
from pathlib import Path  # path-safe defaults

from dotenv import load_dotenv  # .env support for local runs
from loguru import logger  # console logger

from .constants import MAX_FILE_SIZE

BASE_DIR = Path(__file__).resolve().parents[1]  # project root

# Load environment variables; real environment wins over the file
load_dotenv(BASE_DIR / ".env")

DEFAULT_DATABASE_URL = f"sqlite:///{BASE_DIR / 'data' / 'movies.sqlite'}"


def _env_flag(name: str, default: bool = False) -> bool:
	value = os.getenv(name)
	if value is None:
		return default
	return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
	database_url: str = DEFAULT_DATABASE_URL  # SQLAlchemy URL
	db_echo: bool = False  # log every SQL statement
	log_level: str = "INFO"  # loguru level name
	max_file_size: int = MAX_FILE_SIZE  # upload ceiling in bytes
	app_port: int = 8050  # uvicorn port when run as a script

	@classmethod
	def from_env(cls) -> "Settings":
		"""Build settings from the current process environment."""
		return cls(
			database_url=os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL),
			db_echo=_env_flag("DB_ECHO"),
			log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
			max_file_size=int(os.getenv("MAX_FILE_SIZE", MAX_FILE_SIZE)),
			app_port=int(os.getenv("APP_PORT", os.getenv("PORT", "8050"))),
		)


def configure_logging(level: str = "INFO"):
	"""Route loguru output to stderr at `level`, replacing the default sink."""
	logger.remove()
	logger.add(sys.stderr, level=level.upper())
