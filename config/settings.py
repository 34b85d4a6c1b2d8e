import os
from dotenv import load_dotenv

# Load environment variables from the project root
load_dotenv(dotenv_path=os.path.join(os.path.dirname(__file__), "..", ".env"))

DATABASE_URL = os.getenv("DATABASE_URL")

if not DATABASE_URL:
    pg_host = os.getenv("PGHOST")
    pg_port = os.getenv("PGPORT", "5432")
    pg_db = os.getenv("PGDATABASE")
    pg_user = os.getenv("PGUSER")
    pg_password = os.getenv("PGPASSWORD")

    if all([pg_host, pg_db, pg_user, pg_password]):
        DATABASE_URL = (
            f"postgresql+asyncpg://{pg_user}:{pg_password}@{pg_host}:{pg_port}/{pg_db}"
        )

if DATABASE_URL is None:
    raise ValueError(
        "DATABASE_URL is not configured. Set DATABASE_URL explicitly or provide "
        "PGHOST/PGPORT/PGDATABASE/PGUSER/PGPASSWORD environment variables."
    )


def _bool_env(name: str, default: str = "1") -> bool:
    value = os.getenv(name, default).strip().lower()
    return value not in {"0", "false", "no"}


DATABASE_ECHO = _bool_env("DATABASE_ECHO", "false")

ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY")
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
LLM_PROVIDER = os.getenv("LLM_PROVIDER", "anthropic").lower()
API_AUTH_TOKEN = os.getenv("API_AUTH_TOKEN")

# Labeling
LABELING_NAMESPACE = os.getenv("LABELING_NAMESPACE", "post")
ORACLE_MAX_ATTEMPTS = int(os.getenv("ORACLE_MAX_ATTEMPTS", "3"))

CATEGORY_CLASSIFICATION_MODEL = os.getenv("CATEGORY_CLASSIFICATION_MODEL", "claude-3-haiku-20240307")
OPPOSITION_PAIRING_MODEL = os.getenv("OPPOSITION_PAIRING_MODEL", "claude-3-haiku-20240307")
