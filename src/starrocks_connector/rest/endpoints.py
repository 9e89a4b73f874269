import logging

from starrocks_connector.common.errors import ILLEGAL_ARGUMENT_MESSAGE, IllegalArgumentException
from starrocks_connector.common.settings import (
    STARROCKS_BENODES,
    STARROCKS_FENODES,
    STARROCKS_TABLE_IDENTIFIER,
    Settings,
)
from starrocks_connector.common.utils import _shuffled_first

log = logging.getLogger("starrocks_connector.rest")

API_PREFIX = "/api"
SCHEMA = "_schema"
QUERY_PLAN = "_query_plan"
BACKENDS = "/api/backends?is_alive=true"


def parse_identifier(
    table_identifier: str | None, logger: logging.Logger = log
) -> tuple[str, str]:
    """Split ``"db.table"`` into ``(db, table)``."""
    logger.debug(f"Parse identifier '{table_identifier}'.")
    parts = (table_identifier or "").split(".")
    if len(parts) != 2 or not all(parts):
        logger.error(
            ILLEGAL_ARGUMENT_MESSAGE.format(field="table.identifier", value=table_identifier)
        )
        raise IllegalArgumentException("table.identifier", table_identifier)
    return parts[0], parts[1]


def random_node(nodes: str | None, field: str, logger: logging.Logger = log) -> str:
    """Pick one address out of a comma separated node list."""
    logger.debug(f"Parse nodes '{nodes}'.")
    candidates = [n.strip() for n in (nodes or "").split(",") if n.strip()]
    if not candidates:
        logger.error(ILLEGAL_ARGUMENT_MESSAGE.format(field=field, value=nodes))
        raise IllegalArgumentException(field, nodes)
    return _shuffled_first(candidates)


def random_endpoint(fe_nodes: str | None, logger: logging.Logger = log) -> str:
    return random_node(fe_nodes, "fenodes", logger)


def random_be_node(cfg: Settings, logger: logging.Logger = log) -> str:
    return random_node(cfg.get_property(STARROCKS_BENODES), "benodes", logger)


def uri_for_table(cfg: Settings, logger: logging.Logger = log) -> str:
    database, table = parse_identifier(cfg.get_property(STARROCKS_TABLE_IDENTIFIER), logger)
    fe_node = random_endpoint(cfg.get_property(STARROCKS_FENODES), logger)
    return f"http://{fe_node}{API_PREFIX}/{database}/{table}/"
