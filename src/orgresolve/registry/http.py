from __future__ import annotations

import logging
from typing import Dict, Mapping, Optional, Union
from urllib.parse import urljoin

import requests
from requests.adapters import HTTPAdapter
from requests.structures import CaseInsensitiveDict
from urllib3.util.retry import Retry

from ..config import RegistryConfig

log = logging.getLogger(__name__)

RETRY_STATUS_FORCELIST = [429, 500, 502, 503, 504]


def make_session(config: RegistryConfig) -> requests.Session:
    s = requests.Session()
    retry = Retry(
        total=config.max_retries,
        backoff_factor=0.8,
        status_forcelist=RETRY_STATUS_FORCELIST,
        allowed_methods=["GET"],
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry)
    s.mount("https://", adapter)
    s.mount("http://", adapter)
    return s


def is_success(resp: Optional[requests.Response]) -> bool:
    return resp is not None and 200 <= resp.status_code < 300


def is_redirect(resp: Optional[requests.Response]) -> bool:
    return resp is not None and 300 <= resp.status_code < 400


def body_snippet(resp: Optional[requests.Response], limit: int = 300) -> str:
    if resp is None:
        return ""
    try:
        return (resp.text or "")[:limit].replace("\n", " ")
    except Exception as e:
        return f"<unreadable body: {type(e).__name__}>"


def log_error(*, where: str, error: Union[BaseException, str, None]) -> None:
    """
    Log `error` prefixed with the originating `Class.method`. Does nothing
    when either part is missing.
    """
    if not where or not error:
        return
    exc_info = (
        error
        if isinstance(error, BaseException) and error.__traceback__
        else None
    )
    log.error("%s %s", where, error, exc_info=exc_info)


def handle_http_failure(
    *, where: str, response: Optional[requests.Response]
) -> None:
    """Log a non-2xx (or missing) registry response."""
    if response is None:
        log_error(where=where, error="received no response from the registry")
        return
    log_error(
        where=where,
        error=(
            f"received a {response.status_code} response from {response.url}"
            f" with: {body_snippet(response)!r}"
        ),
    )


class RegistryHttpClient:
    """
    Outbound GET helper for the registry.

    Every request carries the standard JSON headers plus Host/User-Agent
    derived from the config. Redirects are followed by hand, up to
    `config.max_redirects`; past that the 3xx response itself is returned.
    Transport errors are logged and reported as None, never raised.
    """

    def __init__(
        self,
        config: RegistryConfig,
        *,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._config = config
        self._session = session or make_session(config)
        self._timeout = config.timeout_s

    @property
    def config(self) -> RegistryConfig:
        return self._config

    def headers(self) -> Dict[str, str]:
        """The standard headers sent with every registry request."""
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Accept-Encoding": "gzip",
            "Host": self._config.host,
            "User-Agent": self._config.user_agent,
        }

    def get(
        self,
        uri: Optional[str],
        additional_headers: Optional[Mapping[str, str]] = None,
        redirects: int = 0,
    ) -> Optional[requests.Response]:
        if not uri:
            return None

        hdrs = CaseInsensitiveDict(self.headers())
        hdrs.update(additional_headers or {})

        try:
            r = self._session.get(
                uri,
                headers=hdrs,
                timeout=self._timeout,
                allow_redirects=False,
            )
        except requests.RequestException as e:
            log_error(where=f"{type(self).__name__}.get", error=e)
            return None

        log.debug("GET %s -> %s", uri, r.status_code)

        if not is_redirect(r):
            return r
        location = r.headers.get("Location")
        if not location:
            return r
        if redirects >= self._config.max_redirects:
            log.warning(
                "%s.get redirect limit (%d) reached at %s; returning the %s",
                type(self).__name__,
                self._config.max_redirects,
                uri,
                r.status_code,
            )
            return r

        try:
            target = urljoin(uri, location)
        except ValueError as e:
            log_error(where=f"{type(self).__name__}.get", error=e)
            return None

        r.close()
        # only the base headers apply after a redirect
        return self.get(target, redirects=redirects + 1)
