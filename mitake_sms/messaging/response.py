from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional


def parse_key_values(body: Any) -> Dict[str, str]:
    """
    Parse the gateway's flat text body.

    The body is newline-separated ``key=value`` lines, e.g.::

        [1]
        msgid=1234567890
        statuscode=1
        AccountPoint=98

    Lines are split on the first '=' only; lines without one (such as the
    ``[1]`` section markers) are skipped. A repeated key keeps its last value.
    """
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    if not isinstance(body, str):
        return {}

    out: Dict[str, str] = {}
    for line in body.splitlines():
        line = line.strip()
        if not line or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        if key:
            out[key] = value.strip()
    return out


class GatewayResponse:
    """Parsed result of one gateway call. Read-only after construction."""

    __slots__ = ("_raw", "_fields")

    def __init__(self, raw_response: Any):
        self._raw = raw_response
        self._fields = MappingProxyType(parse_key_values(raw_response))

    @property
    def raw_response(self) -> Any:
        return self._raw

    @property
    def fields(self) -> Mapping[str, str]:
        return self._fields

    @property
    def code(self) -> Optional[str]:
        return self._fields.get("statuscode")

    @property
    def message_id(self) -> Optional[str]:
        # Comma-joined for batch sends.
        return self._fields.get("msgid")

    @property
    def account_point(self) -> Optional[str]:
        return self._fields.get("AccountPoint")

    @property
    def error(self) -> Optional[str]:
        return self._fields.get("Error")

    @property
    def success(self) -> bool:
        return self.code == "1"

    @property
    def is_error(self) -> bool:
        return not self.success

    def __repr__(self) -> str:
        return (
            f"GatewayResponse(code={self.code!r}, message_id={self.message_id!r}, "
            f"account_point={self.account_point!r}, error={self.error!r})"
        )
