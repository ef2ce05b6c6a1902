"""
Global configuration for orgresolve.
Only infrastructure knobs live here (registry URLs, paging caps, redirects,
timeouts, contact details). Values come from the environment (or a .env file)
and are frozen into a RegistryConfig once at startup.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Final, Optional
from urllib.parse import urlparse

from dotenv import load_dotenv

load_dotenv()


def get_env(
    name: str, *, required: bool = False, default: Optional[str] = None
) -> Optional[str]:
    """Small helper to fetch env vars with an optional 'required' flag."""
    val = os.getenv(name, default)
    if required and not val:
        raise RuntimeError(f"Missing required environment variable: {name}")
    return val


# -----------------------------------------------------------------------------
# Registry endpoints; overridden by .env vars
# -----------------------------------------------------------------------------
REGISTRY_URL: Final[str] = get_env(
    "ORGRESOLVE_REGISTRY_URL", default="https://api.ror.org/"
)
HEARTBEAT_PATH: Final[str] = get_env(
    "ORGRESOLVE_HEARTBEAT_PATH", default="heartbeat"
)
SEARCH_PATH: Final[str] = get_env(
    "ORGRESOLVE_SEARCH_PATH", default="organizations"
)

# -----------------------------------------------------------------------------
# Paging / redirects / HTTP
# -----------------------------------------------------------------------------
# ROR caps a search at 20 items per page; 5 pages keeps worst-case latency sane
MAX_PAGES: Final[int] = int(os.getenv("ORGRESOLVE_MAX_PAGES", "5"))
MAX_RESULTS_PER_PAGE: Final[int] = int(
    os.getenv("ORGRESOLVE_MAX_RESULTS_PER_PAGE", "20")
)
MAX_REDIRECTS: Final[int] = int(os.getenv("ORGRESOLVE_MAX_REDIRECTS", "3"))

DEFAULT_TIMEOUT_S: Final[int] = int(os.getenv("ORGRESOLVE_TIMEOUT_S", "30"))
# Failed pages are never retried; this only covers transport-level retries.
MAX_RETRIES: Final[int] = int(os.getenv("ORGRESOLVE_MAX_RETRIES", "0"))

# -----------------------------------------------------------------------------
# User-Agent components / local store
# -----------------------------------------------------------------------------
APP_NAME: Final[str] = get_env("ORGRESOLVE_APP_NAME", default="orgresolve")
CONTACT_EMAIL: Final[str] = get_env("ORGRESOLVE_CONTACT_EMAIL", default="")
ORG_DB_PATH: Final[str] = get_env("ORGRESOLVE_ORG_DB", default="")


@dataclass(frozen=True)
class RegistryConfig:
    """
    Immutable registry settings shared by the HTTP client and the search
    orchestrator. Construct once at startup and pass it around.

    Every string field must be non-blank and every bound must be in range;
    otherwise construction fails with ValueError.
    """

    base_url: str
    heartbeat_path: str
    search_path: str
    app_name: str
    app_email: str
    max_pages: int = 5
    max_results_per_page: int = 20
    max_redirects: int = 3
    timeout_s: float = 30
    max_retries: int = 0

    def __post_init__(self) -> None:
        for fld in (
            "base_url",
            "heartbeat_path",
            "search_path",
            "app_name",
            "app_email",
        ):
            val = getattr(self, fld)
            if not isinstance(val, str) or not val.strip():
                raise ValueError(f"RegistryConfig.{fld} must be set")

        if not urlparse(self.base_url).hostname:
            raise ValueError(
                f"RegistryConfig.base_url has no hostname: {self.base_url!r}"
            )

        minimums = {
            "max_pages": 1,
            "max_results_per_page": 1,
            "max_redirects": 0,
            "max_retries": 0,
        }
        for fld, lo in minimums.items():
            val = getattr(self, fld)
            if isinstance(val, bool) or not isinstance(val, int) or val < lo:
                raise ValueError(f"RegistryConfig.{fld} must be an int >= {lo}")

        if self.timeout_s <= 0:
            raise ValueError("RegistryConfig.timeout_s must be > 0")

    @property
    def host(self) -> str:
        return urlparse(self.base_url).hostname or ""

    @property
    def heartbeat_url(self) -> str:
        return f"{self.base_url}{self.heartbeat_path}"

    @property
    def search_url(self) -> str:
        return f"{self.base_url}{self.search_path}"

    @property
    def user_agent(self) -> str:
        return f"{self.app_name} ({self.app_email})"

    @classmethod
    def from_env(cls, **overrides: Any) -> "RegistryConfig":
        """
        Build a config from the ORGRESOLVE_* environment. Keyword overrides
        win over env values; a None override is ignored.
        """
        values = {
            "base_url": REGISTRY_URL,
            "heartbeat_path": HEARTBEAT_PATH,
            "search_path": SEARCH_PATH,
            "app_name": APP_NAME,
            "app_email": CONTACT_EMAIL,
            "max_pages": MAX_PAGES,
            "max_results_per_page": MAX_RESULTS_PER_PAGE,
            "max_redirects": MAX_REDIRECTS,
            "timeout_s": DEFAULT_TIMEOUT_S,
            "max_retries": MAX_RETRIES,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


# -----------------------------------------------------------------------------
# Public exports
# -----------------------------------------------------------------------------
__all__ = [
    # endpoints
    "REGISTRY_URL",
    "HEARTBEAT_PATH",
    "SEARCH_PATH",
    # paging/http
    "MAX_PAGES",
    "MAX_RESULTS_PER_PAGE",
    "MAX_REDIRECTS",
    "DEFAULT_TIMEOUT_S",
    "MAX_RETRIES",
    # identity/store
    "APP_NAME",
    "CONTACT_EMAIL",
    "ORG_DB_PATH",
    # helpers
    "get_env",
    "RegistryConfig",
]
