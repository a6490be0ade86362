from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union
from urllib.parse import urlencode

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from mitake_sms.utils.ids import generate_client_id

# Gateway hard cap per SmBulkSend / SmPost request.
MAX_BATCH_SIZE = 500

DEFAULT_CHARSET = "UTF8"

# The gateway cannot carry raw newlines inside a message body; it renders ACK as a line break.
LINE_BREAK = "\x06"

ADVANCED_FIELD_SEP = "$$"

# Charset indicator -> python codec used to percent-encode the form.
_CODECS = {
    "UTF8": "utf-8",
    "UTF-8": "utf-8",
    "BIG5": "big5",
}


class OutboundMessage(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    to: str = Field(..., min_length=1)
    text: str = Field(default="")
    destname: Optional[str] = Field(default=None, validation_alias=AliasChoices("destname", "dest_name"))
    response_url: Optional[str] = Field(default=None, validation_alias=AliasChoices("response_url", "response"))
    client_id: Optional[str] = Field(default=None)
    dlvtime: Optional[str] = Field(default=None)  # YYYYMMDDHHMMSS
    vldtime: Optional[str] = Field(default=None)  # YYYYMMDDHHMMSS

    @classmethod
    def coerce(cls, value: Union["OutboundMessage", Mapping[str, Any]]) -> "OutboundMessage":
        if isinstance(value, cls):
            return value
        return cls.model_validate(dict(value))


MessageLike = Union[OutboundMessage, Mapping[str, Any]]


@dataclass(frozen=True)
class SendOptions:
    destname: Optional[str] = None
    response_url: Optional[str] = None
    client_id: Optional[str] = None
    dlvtime: Optional[str] = None
    vldtime: Optional[str] = None
    charset: str = DEFAULT_CHARSET


@dataclass(frozen=True)
class BatchOptions:
    charset: str = DEFAULT_CHARSET


def replace_newlines(text: Optional[str]) -> str:
    return (text or "").replace("\n", LINE_BREAK)


def codec_for(charset: str) -> str:
    return _CODECS.get((charset or DEFAULT_CHARSET).upper(), charset)


def encode_form(form: Mapping[str, str], charset: str = DEFAULT_CHARSET) -> bytes:
    """
    URL-encode a form body with the codec named by the charset indicator.
    Raises LookupError for an unknown codec and UnicodeEncodeError when the
    text cannot be represented in it.
    """
    encoded = urlencode(list(form.items()), encoding=codec_for(charset), errors="strict")
    return encoded.encode("ascii")


def format_single(
    to: str,
    text: Optional[str],
    username: str,
    password: str,
    options: Optional[SendOptions] = None,
) -> Tuple[Dict[str, str], Dict[str, str]]:
    """Build (query params, form body) for an SmSend call."""
    options = options or SendOptions()
    params = {"CharsetURL": options.charset}
    form: Dict[str, str] = {
        "username": username,
        "password": password,
        "dstaddr": to,
        "smbody": replace_newlines(text),
    }
    # Optional fields go on the wire only when set.
    optional = (
        ("destname", options.destname),
        ("dlvtime", options.dlvtime),
        ("vldtime", options.vldtime),
        ("response", options.response_url),
        ("clientid", options.client_id),
    )
    for key, value in optional:
        if value is not None:
            form[key] = value
    return params, form


def format_batch_lines(messages: Iterable[MessageLike]) -> str:
    return "\n".join(
        f"{m.to}:{replace_newlines(m.text)}" for m in (OutboundMessage.coerce(x) for x in messages)
    )


def format_advanced_record(message: MessageLike, id_factory: Callable[[], str] = generate_client_id) -> str:
    m = OutboundMessage.coerce(message)
    client_id = m.client_id or id_factory()
    fields = [
        client_id,
        m.to,
        m.dlvtime or "",
        m.vldtime or "",
        m.destname or "",
        m.response_url or "",
        replace_newlines(m.text),
    ]
    return ADVANCED_FIELD_SEP.join(fields)


def format_advanced_lines(messages: Iterable[MessageLike], id_factory: Callable[[], str] = generate_client_id) -> str:
    return "\n".join(format_advanced_record(m, id_factory) for m in messages)


def check_limit(limit: int) -> int:
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise ValueError(f"limit must be an int, got {limit!r}")
    if limit < 1 or limit > MAX_BATCH_SIZE:
        raise ValueError(f"limit must be between 1 and {MAX_BATCH_SIZE}, got {limit}")
    return limit


def chunk(messages: Sequence[Any], limit: int) -> List[List[Any]]:
    """
    Split into consecutive slices of at most `limit`, keeping order.
    A list that already fits (including an empty one) yields exactly one chunk.
    """
    check_limit(limit)
    items = list(messages)
    if len(items) <= limit:
        return [items]
    return [items[i : i + limit] for i in range(0, len(items), limit)]
