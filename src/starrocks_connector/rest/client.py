import logging
from collections.abc import Callable
from typing import Any

import requests

from starrocks_connector.common.errors import CONNECT_FAILED_MESSAGE, ConnectedFailedException
from starrocks_connector.common.settings import Settings
from starrocks_connector.common.utils import setup_logging

setup_logging()
log = logging.getLogger("starrocks_connector.rest")

Transport = Callable[..., requests.Response]


def send(
    cfg: Settings,
    method: str,
    uri: str,
    json_body: Any = None,
    logger: logging.Logger = log,
    transport: Transport = requests.request,
) -> str:
    """
    Send one request to a StarRocks FE and return the response body.

    Every attempt goes out on a fresh connection. Any HTTP status other than
    200, or a transport error, counts as a failed attempt; the next attempt
    starts immediately. Raises ``ConnectedFailedException`` once
    ``starrocks.request.retries`` attempts have failed.
    """
    connect_timeout = cfg.connect_timeout_ms
    read_timeout = cfg.read_timeout_ms
    retries = cfg.retries
    logger.debug(
        f"connect timeout set to '{connect_timeout}'. read timeout set to '{read_timeout}'. "
        f"retries set to '{retries}'."
    )

    user, password = cfg.auth
    logger.info(f"Send request to StarRocks FE '{uri}' with user '{user}'.")

    last_error: requests.RequestException | None = None
    status_code: int | None = None

    # 0 or less means no timeout
    timeout = tuple(t / 1000 if t > 0 else None for t in (connect_timeout, read_timeout))

    for attempt in range(retries):
        logger.debug(f"Attempt {attempt} to request {uri}.")
        try:
            r = transport(
                method,
                uri,
                json=json_body,
                auth=(user, password),
                timeout=timeout,
            )
        except requests.RequestException as e:
            last_error = e
            logger.warning(CONNECT_FAILED_MESSAGE.format(uri=uri, status=status_code) + f" {e!s}")
            continue

        status_code = r.status_code
        if status_code != requests.codes.ok:
            logger.warning(
                f"Failed to get response from StarRocks FE {uri}, http code is {status_code}"
            )
            r.close()
            continue

        r.encoding = "utf-8"
        body = r.text
        logger.debug(f"Success get response from StarRocks FE: {uri}, response is: {body}.")
        return body

    logger.error(CONNECT_FAILED_MESSAGE.format(uri=uri, status=status_code))
    raise ConnectedFailedException(uri, status_code, last_error)
