import re
from datetime import datetime

from mitake_sms.utils.ids import dest_hint, generate_client_id

CLIENT_ID_RE = re.compile(r"^\d{17}-[0-9a-f]{8}$")


def test_generate_client_id_format():
    assert CLIENT_ID_RE.match(generate_client_id())


def test_generate_client_id_unique():
    assert generate_client_id() != generate_client_id()


def test_generate_client_id_timestamp_millis():
    cid = generate_client_id(datetime(2024, 1, 2, 3, 4, 5, 678901))
    assert cid.startswith("20240102030405678-")
    assert CLIENT_ID_RE.match(cid)


def test_dest_hint_masks_number():
    assert dest_hint("0912345678") == "...5678"
    assert dest_hint("123") == "123"
    assert dest_hint("") == ""
