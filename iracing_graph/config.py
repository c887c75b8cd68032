"""Environment configuration.

Values are read once, when this module is first imported. Scripts that
keep settings in a ``.env`` file call ``load_dotenv()`` before that.
"""

import os

NEO4J_URI = os.getenv("NEO4J_URI", "bolt://localhost:7687")
NEO4J_USER = os.getenv("NEO4J_USER", "neo4j")
NEO4J_PASSWORD = os.getenv("NEO4J_PASSWORD", "password")
NEO4J_DATABASE = os.getenv("NEO4J_DATABASE", "neo4j")

LOG_LEVEL = os.getenv("LOG_LEVEL", "info")

IRACING_DATA_DIR = os.getenv("IRACING_DATA_DIR", "./data")


def _positive_int(raw: str, default: int) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


SYNC_MAX_WORKERS = _positive_int(os.getenv("SYNC_MAX_WORKERS", "1"), 1)
