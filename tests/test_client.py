import pytest
import requests

from starrocks_connector.common.errors import ConnectedFailedException
from starrocks_connector.rest.client import send

URI = "http://fe1:8030/api/sales/orders/_schema"


def test_send_returns_body(settings, transport, response):
    t = transport(response(200, '{"status": 200}'))

    assert send(settings, "GET", URI, transport=t) == '{"status": 200}'
    assert len(t.calls) == 1
    call = t.calls[0]
    assert call["method"] == "GET"
    assert call["url"] == URI
    assert call["auth"] == ("root", "secret")
    assert call["timeout"] == (30.0, 30.0)
    assert call["json"] is None


def test_send_uses_configured_timeouts(settings, transport, response):
    cfg = settings.with_options(
        **{"starrocks.request.connect.timeout.ms": 1500, "starrocks.request.read.timeout.ms": 2500}
    )
    t = transport(response(200, "ok"))

    send(cfg, "GET", URI, transport=t)
    assert t.calls[0]["timeout"] == (1.5, 2.5)


def test_send_posts_json_body(settings, transport, response):
    t = transport(response(200, "ok"))

    send(settings, "POST", URI, json_body={"sql": "select 1"}, transport=t)
    assert t.calls[0]["method"] == "POST"
    assert t.calls[0]["json"] == {"sql": "select 1"}


def test_send_gives_up_after_retries_on_http_500(settings, transport, response):
    t = transport(response(500, "boom"))

    with pytest.raises(ConnectedFailedException) as exc:
        send(settings, "GET", URI, transport=t)

    assert len(t.calls) == 3
    assert exc.value.uri == URI
    assert exc.value.status_code == 500
    assert exc.value.cause is None


def test_send_reports_last_transport_error(settings, transport):
    err = requests.ConnectionError("refused")
    t = transport(err)

    with pytest.raises(ConnectedFailedException) as exc:
        send(settings.with_options(**{"starrocks.request.retries": 2}), "GET", URI, transport=t)

    assert len(t.calls) == 2
    assert exc.value.status_code is None
    assert exc.value.cause is err
    assert "none" in str(exc.value)


def test_send_recovers_after_failed_attempts(settings, transport, response):
    t = transport(
        requests.Timeout("slow"),
        response(503, "busy"),
        response(200, "finally"),
    )

    assert send(settings, "GET", URI, transport=t) == "finally"
    assert len(t.calls) == 3


def test_send_with_zero_retries_never_calls(settings, transport, response):
    t = transport(response(200, "ok"))

    with pytest.raises(ConnectedFailedException):
        send(settings.with_options(**{"starrocks.request.retries": 0}), "GET", URI, transport=t)
    assert t.calls == []


@pytest.mark.parametrize(
    "connect_ms, read_ms, expected",
    [(0, 2500, (None, 2.5)), (1500, 0, (1.5, None)), (-1, -1, (None, None))],
)
def test_send_non_positive_timeout_means_no_timeout(
    settings, transport, response, connect_ms, read_ms, expected
):
    cfg = settings.with_options(
        **{
            "starrocks.request.connect.timeout.ms": connect_ms,
            "starrocks.request.read.timeout.ms": read_ms,
        }
    )
    t = transport(response(200, "ok"))

    assert send(cfg, "GET", URI, transport=t) == "ok"
    assert t.calls[0]["timeout"] == expected
