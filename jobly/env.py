import os
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_DATABASE_URL = "sqlite:///data/jobly.db"


def load_env() -> None:
    """Load .env from the working directory if present.

    Values already set in the environment win over the file.
    """
    env_path = Path.cwd() / ".env"
    if not env_path.exists():
        return
    load_dotenv(dotenv_path=env_path)


def _flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in {"1", "true", "yes", "on"}


def get_database_url() -> str:
    return os.getenv("JOBLY_DATABASE_URL", DEFAULT_DATABASE_URL)


def get_log_level() -> str:
    return os.getenv("JOBLY_LOG_LEVEL", "INFO")


def get_log_dir() -> Path:
    return Path(os.getenv("JOBLY_LOG_DIR", "logs"))


def log_to_file() -> bool:
    return _flag("JOBLY_LOG_TO_FILE")


def echo_sql() -> bool:
    return _flag("JOBLY_ECHO_SQL")
