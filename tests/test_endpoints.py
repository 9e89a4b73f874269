import pytest

from starrocks_connector.common.errors import IllegalArgumentException
from starrocks_connector.common.settings import Settings
from starrocks_connector.rest.endpoints import (
    parse_identifier,
    random_be_node,
    random_endpoint,
    uri_for_table,
)


@pytest.mark.parametrize(
    "identifier, expected",
    [("db.tbl", ("db", "tbl")), ("sales.orders_2024", ("sales", "orders_2024"))],
)
def test_parse_identifier(identifier, expected):
    assert parse_identifier(identifier) == expected


@pytest.mark.parametrize("identifier", ["", None, "db", "a.b.c", ".tbl", "db.", "."])
def test_parse_identifier_rejects_bad_shapes(identifier):
    with pytest.raises(IllegalArgumentException) as exc:
        parse_identifier(identifier)
    assert exc.value.field == "table.identifier"
    assert exc.value.value == identifier


def test_random_endpoint_returns_trimmed_member():
    nodes = " fe1:8030, fe2:8030 ,fe3:8030"
    for _ in range(20):
        assert random_endpoint(nodes) in {"fe1:8030", "fe2:8030", "fe3:8030"}


def test_random_endpoint_single_node():
    assert random_endpoint("fe1:8030") == "fe1:8030"


@pytest.mark.parametrize("nodes", ["", "   ", None])
def test_random_endpoint_rejects_empty(nodes):
    with pytest.raises(IllegalArgumentException) as exc:
        random_endpoint(nodes)
    assert exc.value.field == "fenodes"


def test_random_be_node():
    cfg = Settings.of({"starrocks.benodes": "be1:8040,be2:8040"})
    assert random_be_node(cfg) in {"be1:8040", "be2:8040"}

    with pytest.raises(IllegalArgumentException) as exc:
        random_be_node(Settings())
    assert exc.value.field == "benodes"


def test_uri_for_table(settings):
    assert uri_for_table(settings) == "http://fe1:8030/api/sales/orders/"


@pytest.mark.parametrize("nodes", ["fe1:8030, ", ",fe1:8030", " , fe1:8030 ,,"])
def test_random_endpoint_skips_empty_entries(nodes):
    for _ in range(20):
        assert random_endpoint(nodes) == "fe1:8030"


@pytest.mark.parametrize("nodes", [",", " , ,"])
def test_random_endpoint_rejects_only_separators(nodes):
    with pytest.raises(IllegalArgumentException):
        random_endpoint(nodes)
