"""
Runtime configuration.

All settings come from environment variables so the same build can run
as a library, a CLI, or the HTTP service.
"""
import os
from pathlib import Path

BUNDLED_PACKS_DIR = Path(__file__).parent / "packs" / "data"

RP_PACKS_DIR = Path(os.getenv("RP_PACKS_DIR", str(BUNDLED_PACKS_DIR)))
RP_STRICT_SCHEMA_VERSION = os.getenv("RP_STRICT_SCHEMA_VERSION", "true").lower() == "true"

RP_LOG_LEVEL = os.getenv("RP_LOG_LEVEL", "INFO")
RP_LOG_JSON = os.getenv("RP_LOG_JSON", "true").lower() == "true"

RP_DOCS_ENABLED = os.getenv("RP_DOCS_ENABLED", "true").lower() == "true"
RP_CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("RP_CORS_ORIGINS", "*").split(",")
    if origin.strip()
]
RP_HOST = os.getenv("RP_HOST", "127.0.0.1")
RP_PORT = int(os.getenv("RP_PORT", "8000"))
