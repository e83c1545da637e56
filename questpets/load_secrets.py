import os
from dotenv import load_dotenv

load_dotenv()

user = os.getenv("DB_USER")
password = os.getenv("DB_PASSWORD")
host = os.getenv("DB_HOST")
port = os.getenv("DB_PORT", "5432")
db_name = os.getenv("DB_NAME")
sqlite_path = os.getenv("SQLITE_PATH", "questpets.sqlite3")

log_level = os.getenv("LOG_LEVEL", "INFO").upper()

# Active task rotation
# 1 reproduces the legacy behaviour where catalog index 0 is never sampled
catalog_sample_start = int(os.getenv("CATALOG_SAMPLE_START", "0"))
rotation_check_minutes = int(os.getenv("ROTATION_CHECK_MINUTES", "0"))

credit_rewards = os.getenv("CREDIT_REWARDS", "false").lower() in ("1", "true", "yes")


def database_url() -> str:
    """Build the async database url. Falls back to a local sqlite file when no postgres host is set."""
    if host:
        return f"postgresql+asyncpg://{user}:{password}@{host}:{port}/{db_name}"
    return f"sqlite+aiosqlite:///{sqlite_path}"


if __name__ == "__main__":
    print(database_url(), catalog_sample_start, credit_rewards)
