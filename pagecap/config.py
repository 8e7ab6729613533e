"""Centralised settings for the pagecap service.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # HTTP listener
    # ------------------------------------------------------------------
    host: str = field(
        default_factory=lambda: os.environ.get("PAGECAP_HOST", "0.0.0.0")
    )
    port: int = field(
        default_factory=lambda: int(os.environ.get("PAGECAP_PORT", "8080"))
    )
    log_level: str = field(
        default_factory=lambda: os.environ.get("PAGECAP_LOG_LEVEL", "INFO")
    )

    # ------------------------------------------------------------------
    # Page fetch
    # ------------------------------------------------------------------
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "30.0"))
    )
    user_agent: str = field(
        default_factory=lambda: os.environ.get(
            "PAGECAP_USER_AGENT", "Mozilla/5.0 (compatible; pagecap/0.1)"
        )
    )
    max_html_bytes: int = field(
        default_factory=lambda: int(os.environ.get("PAGECAP_MAX_HTML_BYTES", "75000"))
    )

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    # Relative paths resolve against the working directory of the process.
    tmp_dir: Path = field(
        default_factory=lambda: Path(os.environ.get("PAGECAP_TMP_DIR", "tmp"))
    )
    convert_command: str = field(
        default_factory=lambda: os.environ.get("PAGECAP_CONVERT_COMMAND", "wkhtmltoimage")
    )
    convert_timeout: float = field(
        default_factory=lambda: float(os.environ.get("PAGECAP_CONVERT_TIMEOUT", "60.0"))
    )

    def tmp_dir_ready(self) -> bool:
        """Return ``True`` when the temp directory exists (it is never created here)."""
        return self.tmp_dir.is_dir()


# Module-level singleton — import this everywhere:
#   from pagecap.config import settings
settings = Settings()
