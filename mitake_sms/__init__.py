"""
Mitake SMS gateway client.

Typical use passes configuration explicitly::

    from mitake_sms import MitakeSettings, MitakeSmsClient

    client = MitakeSmsClient(MitakeSettings(username="user", password="secret"))
    client.send_sms("0912345678", "hello")

For scripts there is one process default, built lazily from ``MITAKE_*``
environment variables. ``configure()`` updates it in place and ``reset()``
drops both the default configuration and the default client (tests call it
between cases).
"""

from __future__ import annotations

from typing import Any, Iterable, Optional

from mitake_sms.config.settings import DEFAULT_API_URL, MitakeSettings
from mitake_sms.errors import AuthenticationError, InvalidRequestError, MitakeSmsError, ServerError
from mitake_sms.messaging.client import BatchResult, MitakeSmsClient
from mitake_sms.messaging.formatter import MAX_BATCH_SIZE, BatchOptions, MessageLike, OutboundMessage, SendOptions
from mitake_sms.messaging.response import GatewayResponse
from mitake_sms.utils.ids import generate_client_id

__version__ = "1.0.0"

__all__ = [
    "AuthenticationError",
    "BatchOptions",
    "DEFAULT_API_URL",
    "GatewayResponse",
    "InvalidRequestError",
    "MAX_BATCH_SIZE",
    "MitakeSettings",
    "MitakeSmsClient",
    "MitakeSmsError",
    "OutboundMessage",
    "SendOptions",
    "ServerError",
    "batch_send",
    "configure",
    "generate_client_id",
    "get_client",
    "get_config",
    "reset",
    "send_sms",
]

_config: Optional[MitakeSettings] = None
_client: Optional[MitakeSmsClient] = None


def get_config() -> MitakeSettings:
    global _config
    if _config is None:
        _config = MitakeSettings()
    return _config


def configure(**values: Any) -> MitakeSettings:
    # Updates the default in place; a default client already built keeps its httpx timeouts/base_url.
    config = get_config()
    for key, value in values.items():
        if key not in MitakeSettings.model_fields:
            raise AttributeError(f"unknown setting: {key}")
        setattr(config, key, value)
    return config


def get_client() -> MitakeSmsClient:
    global _client
    if _client is None:
        _client = MitakeSmsClient(get_config())
    return _client


def reset() -> None:
    global _config, _client
    if _client is not None:
        _client.close()
    _config = None
    _client = None


def send_sms(to: str, text: str, options: Optional[SendOptions] = None) -> GatewayResponse:
    return get_client().send_sms(to, text, options)


def batch_send(messages: Iterable[MessageLike], options: Optional[BatchOptions] = None) -> BatchResult:
    return get_client().batch_send(messages, options)
