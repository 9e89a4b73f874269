from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from .errors import ParseNumberFailedException

ENV_PREFIX = "STARROCKS_"

STARROCKS_FENODES = "starrocks.fenodes"
STARROCKS_BENODES = "starrocks.benodes"
STARROCKS_TABLE_IDENTIFIER = "starrocks.table.identifier"
STARROCKS_REQUEST_AUTH_USER = "starrocks.request.auth.user"
STARROCKS_REQUEST_AUTH_PASSWORD = "starrocks.request.auth.password"
STARROCKS_REQUEST_CONNECT_TIMEOUT_MS = "starrocks.request.connect.timeout.ms"
STARROCKS_REQUEST_READ_TIMEOUT_MS = "starrocks.request.read.timeout.ms"
STARROCKS_REQUEST_RETRIES = "starrocks.request.retries"
STARROCKS_READ_FIELD = "starrocks.read.field"
STARROCKS_FILTER_QUERY = "starrocks.filter.query"
STARROCKS_TABLET_SIZE = "starrocks.request.tablet.size"

STARROCKS_REQUEST_CONNECT_TIMEOUT_MS_DEFAULT = 30 * 1000
STARROCKS_REQUEST_READ_TIMEOUT_MS_DEFAULT = 30 * 1000
STARROCKS_REQUEST_RETRIES_DEFAULT = 3
STARROCKS_READ_FIELD_DEFAULT = "*"
STARROCKS_TABLET_SIZE_DEFAULT = 2**31 - 1
STARROCKS_TABLET_SIZE_MIN = 1

# value of the "status" field in a successful FE response body
REST_RESPONSE_STATUS_OK = 200


@dataclass(frozen=True)
class Settings:
    """
    Read-only key/value options of one read or write job.

    Stored as a sorted tuple so that equal option sets hash equally and
    can key the stream load client cache.
    """

    options: tuple[tuple[str, str], ...] = field(default_factory=tuple)

    @classmethod
    def of(cls, options: Mapping[str, object] | None = None, **kwargs: object) -> Settings:
        merged = dict(options or {})
        merged.update(kwargs)
        return cls(
            options=tuple(sorted((str(k), str(v)) for k, v in merged.items() if v is not None))
        )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        environ = os.environ if environ is None else environ
        opts = {
            name.lower().replace("_", "."): value
            for name, value in environ.items()
            if name.startswith(ENV_PREFIX)
        }
        return cls.of(opts)

    def __repr__(self) -> str:
        shown = {
            k: ("***" if k == STARROCKS_REQUEST_AUTH_PASSWORD else v) for k, v in self.options
        }
        return f"Settings({shown})"

    def as_dict(self) -> dict[str, str]:
        return dict(self.options)

    def with_options(self, **kwargs: object) -> Settings:
        return Settings.of(self.as_dict(), **kwargs)

    def get_property(self, key: str, default: str | None = None) -> str | None:
        return self.as_dict().get(key, default)

    def get_int_property(self, key: str, default: int) -> int:
        raw = self.get_property(key)
        if raw is None:
            return default
        try:
            return int(raw.strip())
        except ValueError as e:
            raise ParseNumberFailedException(key, raw) from e

    # Request executor knobs

    @property
    def connect_timeout_ms(self) -> int:
        return self.get_int_property(
            STARROCKS_REQUEST_CONNECT_TIMEOUT_MS, STARROCKS_REQUEST_CONNECT_TIMEOUT_MS_DEFAULT
        )

    @property
    def read_timeout_ms(self) -> int:
        return self.get_int_property(
            STARROCKS_REQUEST_READ_TIMEOUT_MS, STARROCKS_REQUEST_READ_TIMEOUT_MS_DEFAULT
        )

    @property
    def retries(self) -> int:
        return self.get_int_property(STARROCKS_REQUEST_RETRIES, STARROCKS_REQUEST_RETRIES_DEFAULT)

    @property
    def auth(self) -> tuple[str, str]:
        return (
            self.get_property(STARROCKS_REQUEST_AUTH_USER, "") or "",
            self.get_property(STARROCKS_REQUEST_AUTH_PASSWORD, "") or "",
        )
