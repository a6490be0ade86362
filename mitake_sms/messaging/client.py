from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

import httpx

from mitake_sms.config.settings import MitakeSettings
from mitake_sms.errors import error_for_status
from mitake_sms.messaging.formatter import (
    MAX_BATCH_SIZE,
    BatchOptions,
    MessageLike,
    OutboundMessage,
    SendOptions,
    chunk,
    encode_form,
    format_advanced_lines,
    format_batch_lines,
    format_single,
)
from mitake_sms.messaging.response import GatewayResponse
from mitake_sms.ops.metrics import Timer
from mitake_sms.utils.ids import dest_hint, generate_client_id

log = logging.getLogger("mitake_sms.client")

SINGLE_SEND_ENDPOINT = "SmSend"
BULK_SEND_ENDPOINT = "SmBulkSend"
ADVANCED_SEND_ENDPOINT = "SmPost"

BatchResult = Union[GatewayResponse, List[GatewayResponse]]


class MitakeSmsClient:
    """
    Synchronous client for the Mitake SMS HTTP API.

    One httpx.Client is built per instance from the configuration it was given.
    Batch calls over the limit are split and sent one chunk at a time; the
    first failing chunk raises and nothing after it is sent.
    """

    def __init__(self, config: Optional[MitakeSettings] = None, transport: Optional[httpx.BaseTransport] = None):
        if config is None:
            from mitake_sms import get_config

            config = get_config()
        self.config = config
        self._http = self._build_http(transport)

    def _build_http(self, transport: Optional[httpx.BaseTransport]) -> httpx.Client:
        base_url = self.config.api_url
        if not base_url.endswith("/"):
            base_url += "/"
        return httpx.Client(
            base_url=base_url,
            timeout=httpx.Timeout(self.config.timeout, connect=self.config.open_timeout),
            transport=transport,
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "MitakeSmsClient":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    @staticmethod
    def generate_client_id() -> str:
        return generate_client_id()

    # ---------------------------------------------------------
    # Single
    # ---------------------------------------------------------
    def send_sms(self, to: str, text: str, options: Optional[SendOptions] = None) -> GatewayResponse:
        options = options or SendOptions()
        params, form = format_single(to, text, self.config.username, self.config.password, options)
        return self._post(SINGLE_SEND_ENDPOINT, params, form, options.charset, dest=to, count=1)

    # ---------------------------------------------------------
    # Batch (to:text lines)
    # ---------------------------------------------------------
    def batch_send(self, messages: Iterable[MessageLike], options: Optional[BatchOptions] = None) -> BatchResult:
        return self.batch_send_with_limit(messages, MAX_BATCH_SIZE, options)

    def batch_send_with_limit(
        self,
        messages: Iterable[MessageLike],
        limit: int = MAX_BATCH_SIZE,
        options: Optional[BatchOptions] = None,
    ) -> BatchResult:
        options = options or BatchOptions()
        batches = chunk([OutboundMessage.coerce(m) for m in messages], limit)
        responses = []
        for batch in batches:
            form = {
                "username": self.config.username,
                "password": self.config.password,
                "smbody": format_batch_lines(batch),
            }
            responses.append(self._post_batch(BULK_SEND_ENDPOINT, form, options.charset, len(batch)))
        return responses[0] if len(responses) == 1 else responses

    # ---------------------------------------------------------
    # Advanced batch ($$-delimited records)
    # ---------------------------------------------------------
    def advanced_batch_send(self, messages: Iterable[MessageLike], options: Optional[BatchOptions] = None) -> BatchResult:
        return self.advanced_batch_send_with_limit(messages, MAX_BATCH_SIZE, options)

    def advanced_batch_send_with_limit(
        self,
        messages: Iterable[MessageLike],
        limit: int = MAX_BATCH_SIZE,
        options: Optional[BatchOptions] = None,
    ) -> BatchResult:
        options = options or BatchOptions()
        batches = chunk([OutboundMessage.coerce(m) for m in messages], limit)
        responses = []
        for batch in batches:
            form = {
                "username": self.config.username,
                "password": self.config.password,
                "data": format_advanced_lines(batch, self.generate_client_id),
            }
            responses.append(self._post_batch(ADVANCED_SEND_ENDPOINT, form, options.charset, len(batch)))
        return responses[0] if len(responses) == 1 else responses

    # ---------------------------------------------------------
    # Transport
    # ---------------------------------------------------------
    def _post_batch(self, endpoint: str, form: Dict[str, str], charset: str, count: int) -> GatewayResponse:
        return self._post(endpoint, {"Encoding_PostIn": charset}, form, charset, dest="", count=count)

    def _post(
        self,
        endpoint: str,
        params: Mapping[str, str],
        form: Mapping[str, str],
        charset: str,
        dest: str,
        count: int,
    ) -> GatewayResponse:
        timer = Timer()
        log.info(
            "sms_send_attempt",
            extra={"extra": {"event": "sms_send_attempt", "endpoint": endpoint, "dest": dest_hint(dest), "count": count}},
        )

        try:
            resp = self._http.post(
                endpoint,
                params=dict(params),
                content=encode_form(form, charset),
                headers={"Content-Type": "application/x-www-form-urlencoded"},
            )
        except httpx.HTTPError as e:
            log.error(
                "sms_send_exception",
                extra={
                    "extra": {
                        "event": "sms_send_exception",
                        "endpoint": endpoint,
                        "dest": dest_hint(dest),
                        "error_type": type(e).__name__,
                        "message": str(e),
                        "latency_ms": timer.ms(),
                    }
                },
            )
            raise

        return self._handle_response(endpoint, resp, dest, timer)

    def _handle_response(self, endpoint: str, resp: httpx.Response, dest: str, timer: Timer) -> GatewayResponse:
        if resp.status_code != 200:
            err = error_for_status(resp.status_code)
            log.warning(
                "sms_send_failed",
                extra={
                    "extra": {
                        "event": "sms_send_failed",
                        "endpoint": endpoint,
                        "dest": dest_hint(dest),
                        "status_code": resp.status_code,
                        "error_type": type(err).__name__,
                        "latency_ms": timer.ms(),
                    }
                },
            )
            raise err

        result = GatewayResponse(resp.text)
        log.info(
            "sms_send_result",
            extra={
                "extra": {
                    "event": "sms_send_result",
                    "endpoint": endpoint,
                    "dest": dest_hint(dest),
                    "status_code": resp.status_code,
                    "ok": result.success,
                    "statuscode": result.code,
                    "msgid": result.message_id,
                    "latency_ms": timer.ms(),
                }
            },
        )
        return result
