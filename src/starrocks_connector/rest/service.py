"""
Discovery calls against a StarRocks FE: table schema, query plan and the
list of live BEs. Every function is stateless; the options come in through
``Settings`` and the HTTP transport can be swapped for tests.
"""

from __future__ import annotations

import json
import logging
from typing import TypeVar

import requests
from pydantic import BaseModel, ValidationError

from starrocks_connector.common.errors import (
    ILLEGAL_ARGUMENT_MESSAGE,
    SHOULD_NOT_HAPPEN_MESSAGE,
    DecodeFailedException,
    IllegalArgumentException,
    RemoteStatusNotOkException,
    ShouldNeverHappenException,
)
from starrocks_connector.common.settings import (
    REST_RESPONSE_STATUS_OK,
    STARROCKS_FENODES,
    STARROCKS_FILTER_QUERY,
    STARROCKS_READ_FIELD,
    STARROCKS_READ_FIELD_DEFAULT,
    STARROCKS_TABLE_IDENTIFIER,
    Settings,
)
from starrocks_connector.common.utils import _shuffled_first
from starrocks_connector.planner.assignor import select_be_for_tablet
from starrocks_connector.planner.partitions import tablets_map_to_partition

from .client import Transport, send
from .endpoints import (
    BACKENDS,
    QUERY_PLAN,
    SCHEMA,
    parse_identifier,
    random_endpoint,
    uri_for_table,
)
from .models import BackendRow, Backends, PartitionDefinition, QueryPlan, Schema

log = logging.getLogger("starrocks_connector.rest")

M = TypeVar("M", bound=BaseModel)


def _decode(response: str, model: type[M], source: str, logger: logging.Logger) -> M:
    try:
        data = json.loads(response)
    except json.JSONDecodeError as e:
        msg = f"StarRocks {source}'s response is not a json."
        logger.error(f"{msg} res: {response}", exc_info=e)
        raise DecodeFailedException(msg, response) from e

    if data is None:
        logger.error(SHOULD_NOT_HAPPEN_MESSAGE)
        raise ShouldNeverHappenException()

    try:
        return model.model_validate(data)
    except ValidationError as e:
        msg = f"StarRocks {source}'s response cannot map to {model.__name__}."
        logger.error(f"{msg} res: {response}", exc_info=e)
        raise DecodeFailedException(msg, response) from e


def _check_status(status: int, logger: logging.Logger) -> None:
    if status != REST_RESPONSE_STATUS_OK:
        logger.error(f"StarRocks FE's response is not OK, status is {status}")
        raise RemoteStatusNotOkException(status)


# Schema


def parse_schema(response: str, logger: logging.Logger = log) -> Schema:
    logger.debug(f"Parse response '{response}' to schema.")
    schema = _decode(response, Schema, "FE", logger)
    _check_status(schema.status, logger)
    logger.debug(f"Parsing schema result is '{schema}'.")
    return schema


def get_schema(
    cfg: Settings, logger: logging.Logger = log, transport: Transport = requests.request
) -> Schema:
    logger.debug("Finding schema.")
    response = send(
        cfg, "GET", uri_for_table(cfg, logger) + SCHEMA, logger=logger, transport=transport
    )
    logger.debug(f"Find schema response is '{response}'.")
    return parse_schema(response, logger)


# Query plan


def build_query_sql(cfg: Settings, database: str, table: str) -> str:
    """
    Scan statement sent to the FE. Projection and filter are spliced in as
    given by the caller, without any escaping.
    """
    columns = cfg.get_property(STARROCKS_READ_FIELD) or STARROCKS_READ_FIELD_DEFAULT
    sql = f"select {columns} from `{database}`.`{table}`"
    predicate = cfg.get_property(STARROCKS_FILTER_QUERY)
    if predicate:
        sql += f" where {predicate}"
    return sql


def parse_query_plan(response: str, logger: logging.Logger = log) -> QueryPlan:
    query_plan = _decode(response, QueryPlan, "FE", logger)
    _check_status(query_plan.status, logger)
    logger.debug(f"Parsing partition result is '{query_plan}'.")
    return query_plan


def get_query_plan(
    cfg: Settings, logger: logging.Logger = log, transport: Transport = requests.request
) -> QueryPlan:
    database, table = parse_identifier(cfg.get_property(STARROCKS_TABLE_IDENTIFIER), logger)
    sql = build_query_sql(cfg, database, table)
    logger.debug(f"Query SQL Sending to StarRocks FE is: '{sql}'.")

    response = send(
        cfg,
        "POST",
        uri_for_table(cfg, logger) + QUERY_PLAN,
        json_body={"sql": sql},
        logger=logger,
        transport=transport,
    )
    logger.debug(f"Find partition response is '{response}'.")
    return parse_query_plan(response, logger)


def find_partitions(
    cfg: Settings, logger: logging.Logger = log, transport: Transport = requests.request
) -> list[PartitionDefinition]:
    """Plan a full read of the configured table as a list of work units."""
    database, table = parse_identifier(cfg.get_property(STARROCKS_TABLE_IDENTIFIER), logger)
    query_plan = get_query_plan(cfg, logger, transport)
    be_to_tablets = select_be_for_tablet(query_plan, logger)
    return tablets_map_to_partition(
        cfg,
        be_to_tablets,
        query_plan.opaqued_query_plan,
        database,
        table,
        logger,
    )


# Live BEs


def parse_backends(response: str, logger: logging.Logger = log) -> list[BackendRow] | None:
    backends = _decode(response, Backends, "BE", logger)
    if backends.status is not None:
        _check_status(backends.status, logger)
    logger.debug(f"Parsing backends result is '{backends.backends}'.")
    return backends.backends


def random_backend(
    cfg: Settings, logger: logging.Logger = log, transport: Transport = requests.request
) -> str:
    """Ask the FE for the live BEs and return one of them as ``ip:http_port``."""
    fe_node = random_endpoint(cfg.get_property(STARROCKS_FENODES), logger)
    response = send(cfg, "GET", f"http://{fe_node}{BACKENDS}", logger=logger, transport=transport)
    logger.info(f"Backend Info:{response}")
    backends = parse_backends(response, logger)
    if not backends:
        logger.error(ILLEGAL_ARGUMENT_MESSAGE.format(field="workers", value=backends))
        raise IllegalArgumentException("workers", str(backends))
    backend = _shuffled_first(backends)
    return backend.address
