from __future__ import annotations

import logging
import uuid
from typing import Any

import requests

from starrocks_connector.common.errors import DecodeFailedException, StarrocksException
from starrocks_connector.common.settings import Settings
from starrocks_connector.rest.endpoints import API_PREFIX, random_be_node

log = logging.getLogger("starrocks_connector.load")

STREAM_LOAD = "_stream_load"
SUCCESS_STATUSES = ("Success", "Publish Timeout")


class StreamLoadClient:
    """
    Write-side client: one pooled HTTP session per option set, pushing
    batches of rows to a BE with stream load.
    """

    def __init__(self, cfg: Settings):
        self.cfg = cfg
        self.session = requests.Session()
        self.session.auth = cfg.auth
        self.session.headers.update({"Expect": "100-continue"})

    def load(
        self,
        database: str,
        table: str,
        data: str | bytes,
        label: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        label = label or f"starrocks-{uuid.uuid4()}"
        be_node = random_be_node(self.cfg)
        url = f"http://{be_node}{API_PREFIX}/{database}/{table}/{STREAM_LOAD}"
        timeout = (self.cfg.connect_timeout_ms / 1000, self.cfg.read_timeout_ms / 1000)

        log.info(f"Stream load '{label}' to {url}")
        r = self.session.put(
            url, data=data, headers={"label": label, **(headers or {})}, timeout=timeout
        )
        if r.status_code != requests.codes.ok:
            raise StarrocksException(
                f"Stream load '{label}' to {url} failed, http code is {r.status_code}: {r.text}"
            )

        try:
            result = r.json()
        except requests.JSONDecodeError as e:
            raise DecodeFailedException("Stream load response is not a json.", r.text) from e

        if not isinstance(result, dict):
            raise DecodeFailedException("Stream load response is not a json object.", r.text)
        if result.get("Status") not in SUCCESS_STATUSES:
            raise StarrocksException(f"Stream load '{label}' failed: {result}")
        return result

    def close(self) -> None:
        self.session.close()
