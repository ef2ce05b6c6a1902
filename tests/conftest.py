import json
import os
from typing import Any, Callable, Dict, List, Optional, Union
from urllib.parse import urlencode

import pytest

# Load .env if present, but don't fail if it's missing.
try:
    from dotenv import load_dotenv

    load_dotenv()
except Exception:
    pass

from orgresolve.config import RegistryConfig
from orgresolve.core.contracts import LocalOrgRecord
from orgresolve.stores.memory import InMemoryOrgStore

# ---- mode & env flags -------------------------------------------------------


def _truthy(s: str | None) -> bool:
    return str(s).strip().lower() in {"1", "true", "yes", "on"}


LIVE = _truthy(os.getenv("ORGRESOLVE_LIVE_TESTS"))
LIVE_CONTACT = os.getenv("ORGRESOLVE_CONTACT_EMAIL", "")


# =============================================================================
# OFFLINE HTTP FAKES (used unless ORGRESOLVE_LIVE_TESTS is set)
# =============================================================================


class FakeResponse:
    """Just enough of requests.Response for the registry client."""

    def __init__(
        self,
        status: int = 200,
        json_obj: Any = None,
        text: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
        url: str = "",
    ) -> None:
        self.status_code = status
        self._json = json_obj
        if text is None:
            text = "" if json_obj is None else json.dumps(json_obj)
        self.text = text
        self.headers = headers or {}
        self.url = url
        self.closed = False

    def json(self):
        if isinstance(self._json, Exception):
            raise self._json
        if self._json is None:
            # mirrors requests: a non-JSON body raises a ValueError subclass
            return json.loads(self.text)
        return self._json

    def close(self) -> None:
        self.closed = True


Route = Union[FakeResponse, Exception, Callable[[str], FakeResponse]]


class FakeSession:
    """
    Stand-in for requests.Session: answers GETs from a url -> response map
    and records every call. Unknown URLs get a 404.
    """

    def __init__(self, routes: Optional[Dict[str, Route]] = None) -> None:
        self.routes: Dict[str, Route] = dict(routes or {})
        self.calls: List[Dict[str, Any]] = []

    @property
    def urls(self) -> List[str]:
        return [c["url"] for c in self.calls]

    def get(self, url, headers=None, timeout=None, allow_redirects=True, **kw):
        self.calls.append(
            {
                "url": url,
                "headers": dict(headers or {}),
                "timeout": timeout,
                "allow_redirects": allow_redirects,
            }
        )
        route = self.routes.get(url)
        if route is None:
            return FakeResponse(status=404, text="not found", url=url)
        if isinstance(route, Exception):
            raise route
        resp = route if isinstance(route, FakeResponse) else route(url)
        resp.url = url
        return resp


def page_url(config: RegistryConfig, name: str, page: int) -> str:
    return f"{config.search_url}?{urlencode({'query': name, 'page': page})}"


def items(n: int, start: int = 0) -> List[Dict[str, Any]]:
    return [
        {
            "id": f"https://ror.org/{i:09d}",
            "name": f"Org {i}",
            "country": {"country_name": "Nowhere"},
        }
        for i in range(start, start + n)
    ]


@pytest.fixture
def fake_response():
    return FakeResponse


@pytest.fixture
def fake_session():
    return FakeSession


@pytest.fixture
def page_url_for():
    return page_url


@pytest.fixture
def make_items():
    return items


# =============================================================================
# CONFIG / STORE FIXTURES
# =============================================================================


@pytest.fixture
def config() -> RegistryConfig:
    return RegistryConfig(
        base_url="https://registry.test/",
        heartbeat_path="heartbeat",
        search_path="organizations",
        app_name="orgresolve-tests",
        app_email="helpdesk@example.org",
        max_pages=2,
        max_results_per_page=5,
        max_redirects=2,
        timeout_s=5,
    )


@pytest.fixture
def org_records() -> List[LocalOrgRecord]:
    return [
        LocalOrgRecord(name="Sample University", abbreviation="SU", id="1"),
        LocalOrgRecord(name="Example College", abbreviation="EC", id="2"),
        LocalOrgRecord(name="Other", abbreviation="", is_other=True, id="3"),
        LocalOrgRecord(name="Acme Research Lab", abbreviation="ARL", id="4"),
    ]


@pytest.fixture
def org_store(org_records) -> InMemoryOrgStore:
    return InMemoryOrgStore(org_records)


@pytest.fixture(scope="session")
def live_config():
    """
    Config for the public registry; only created in LIVE mode.
    Otherwise skipped to avoid any network.
    """
    if not LIVE:
        pytest.skip("live_config skipped (offline mode)")
    if not LIVE_CONTACT:
        pytest.skip("ORGRESOLVE_CONTACT_EMAIL missing for live tests")
    return RegistryConfig.from_env(app_email=LIVE_CONTACT)


# =============================================================================
# PYTEST MARKER HANDLING
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    # Register a 'live' marker for any tests that explicitly want real I/O.
    config.addinivalue_line("markers", "live: test requires live API access")


def pytest_runtest_setup(item: pytest.Item) -> None:
    # If a test is marked live but we're not in LIVE mode, skip it proactively.
    if "live" in item.keywords and not LIVE:
        pytest.skip("live test skipped (ORGRESOLVE_LIVE_TESTS not enabled)")
