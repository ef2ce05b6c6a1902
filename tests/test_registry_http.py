import logging

import requests

from orgresolve.registry.http import (
    RegistryHttpClient,
    handle_http_failure,
    is_success,
    log_error,
    make_session,
)


def test_make_session_mounts_retry_adapter(config):
    s = make_session(config)
    assert "https://" in s.adapters
    assert "http://" in s.adapters
    # failed pages are not retried unless asked for
    assert s.adapters["https://"].max_retries.total == config.max_retries == 0


def test_base_headers(config):
    client = RegistryHttpClient(config, session=requests.Session())
    h = client.headers()
    assert h["Content-Type"] == "application/json"
    assert h["Accept"] == "application/json"
    assert h["Accept-Encoding"] == "gzip"
    assert h["Host"] == "registry.test"
    assert h["User-Agent"] == "orgresolve-tests (helpdesk@example.org)"


def test_get_sends_base_headers_without_auto_redirects(
    config, fake_session, fake_response
):
    uri = "https://registry.test/heartbeat"
    sess = fake_session({uri: fake_response(200)})
    client = RegistryHttpClient(config, session=sess)

    resp = client.get(uri)
    assert resp.status_code == 200
    call = sess.calls[0]
    assert call["headers"]["User-Agent"] == client.headers()["User-Agent"]
    assert call["headers"]["Host"] == "registry.test"
    assert call["allow_redirects"] is False
    assert call["timeout"] == config.timeout_s


def test_additional_headers_are_added_and_override(
    config, fake_session, fake_response
):
    uri = "https://registry.test/x"
    sess = fake_session({uri: fake_response(200)})
    client = RegistryHttpClient(config, session=sess)

    client.get(uri, additional_headers={"Foo": "bar", "Accept": "text/csv"})
    sent = sess.calls[0]["headers"]
    assert sent["Foo"] == "bar"
    assert sent["Accept"] == "text/csv"
    assert sent["Content-Type"] == "application/json"


def test_blank_uri_issues_no_request(config, fake_session):
    sess = fake_session()
    client = RegistryHttpClient(config, session=sess)
    assert client.get(None) is None
    assert client.get("") is None
    assert sess.calls == []


def test_transport_failure_returns_none_and_logs(config, fake_session, caplog):
    uri = "https://registry.test/heartbeat"
    sess = fake_session({uri: requests.ConnectionError("connection refused")})
    client = RegistryHttpClient(config, session=sess)

    with caplog.at_level(logging.ERROR, logger="orgresolve.registry.http"):
        assert client.get(uri) is None
    assert "RegistryHttpClient.get" in caplog.text
    assert "connection refused" in caplog.text


def test_malformed_uri_returns_none(config, caplog):
    client = RegistryHttpClient(config, session=requests.Session())
    with caplog.at_level(logging.ERROR, logger="orgresolve.registry.http"):
        assert client.get("badurl~^(%") is None
    assert "RegistryHttpClient.get" in caplog.text


def _chain(fake_response, hops):
    """https://registry.test/r0 -> r1 -> ... -> r<hops> (200)."""
    routes = {}
    for i in range(hops):
        # alternate absolute and relative Location headers
        loc = f"/r{i + 1}" if i % 2 == 0 else f"https://registry.test/r{i + 1}"
        routes[f"https://registry.test/r{i}"] = fake_response(
            302, headers={"Location": loc}
        )
    routes[f"https://registry.test/r{hops}"] = fake_response(
        200, json_obj={"ok": True}
    )
    return routes


def test_redirect_chain_within_limit_is_followed(
    config, fake_session, fake_response
):
    sess = fake_session(_chain(fake_response, config.max_redirects))
    client = RegistryHttpClient(config, session=sess)

    resp = client.get("https://registry.test/r0")
    assert resp.status_code == 200
    assert resp.json() == {"ok": True}
    assert sess.urls == [
        "https://registry.test/r0",
        "https://registry.test/r1",
        "https://registry.test/r2",
    ]


def test_redirect_chain_past_limit_returns_redirect(
    config, fake_session, fake_response, caplog
):
    sess = fake_session(_chain(fake_response, config.max_redirects + 1))
    client = RegistryHttpClient(config, session=sess)

    with caplog.at_level(logging.WARNING, logger="orgresolve.registry.http"):
        resp = client.get("https://registry.test/r0")
    assert resp.status_code == 302
    assert resp.url == "https://registry.test/r2"
    assert "https://registry.test/r3" not in sess.urls
    assert "redirect limit" in caplog.text


def test_redirect_drops_additional_headers(config, fake_session, fake_response):
    sess = fake_session(_chain(fake_response, 1))
    client = RegistryHttpClient(config, session=sess)

    client.get("https://registry.test/r0", additional_headers={"Foo": "bar"})
    assert sess.calls[0]["headers"]["Foo"] == "bar"
    assert "Foo" not in sess.calls[1]["headers"]
    assert sess.calls[1]["headers"]["Accept"] == "application/json"


def test_redirect_without_location_is_returned(
    config, fake_session, fake_response
):
    uri = "https://registry.test/r0"
    sess = fake_session({uri: fake_response(304)})
    client = RegistryHttpClient(config, session=sess)
    assert client.get(uri).status_code == 304
    assert len(sess.calls) == 1


def test_is_success_only_for_2xx(fake_response):
    assert is_success(fake_response(200))
    assert is_success(fake_response(204))
    assert not is_success(fake_response(302))
    assert not is_success(fake_response(404))
    assert not is_success(None)


def test_handle_http_failure_logs_status_and_body(fake_response, caplog):
    resp = fake_response(503, text="Service\nUnavailable", url="https://r.test/")
    with caplog.at_level(logging.ERROR, logger="orgresolve.registry.http"):
        handle_http_failure(where="RegistrySearch.search", response=resp)
        handle_http_failure(where="RegistrySearch.search", response=None)
    assert "RegistrySearch.search received a 503" in caplog.text
    assert "Service Unavailable" in caplog.text
    assert "no response" in caplog.text


def test_log_error_needs_where_and_error(caplog):
    with caplog.at_level(logging.ERROR, logger="orgresolve.registry.http"):
        log_error(where="", error="boom")
        log_error(where="X.y", error=None)
    assert caplog.records == []


def test_unparseable_location_returns_none_and_logs(
    config, fake_session, fake_response, caplog
):
    uri = "https://registry.test/r0"
    sess = fake_session({uri: fake_response(302, headers={"Location": "http://[oops/"})})
    client = RegistryHttpClient(config, session=sess)

    with caplog.at_level(logging.ERROR, logger="orgresolve.registry.http"):
        assert client.get(uri) is None
    assert sess.urls == [uri]
    assert "Invalid IPv6 URL" in caplog.text
