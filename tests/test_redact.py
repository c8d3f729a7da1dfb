from __future__ import annotations

from pyflexnotify._redact import redact_for_log

SUBSCRIPTION = {
    "endpoint": "https://fcm.googleapis.com/fcm/send/" + "c" * 120,
    "expirationTime": None,
    "keys": {"p256dh": "BPUBLIC", "auth": "SECRET"},
}


def test_redact_for_log_drops_key_material() -> None:
    redacted = redact_for_log(SUBSCRIPTION)
    assert redacted["keys"] == "<redacted>"
    assert redacted["expirationTime"] is None
    assert "SECRET" not in repr(redacted)


def test_redact_for_log_truncates_endpoint() -> None:
    redacted = redact_for_log(SUBSCRIPTION, max_string=20)
    assert redacted["endpoint"] == "https://fcm.googleap…<truncated>"


def test_redact_for_log_flattens_keys_given_at_top_level() -> None:
    redacted = redact_for_log({"endpoint": "https://push.example/a", "auth": "A", "P256DH": "P", "extra": [1, 2]})
    assert redacted == {
        "endpoint": "https://push.example/a",
        "auth": "<redacted>",
        "P256DH": "<redacted>",
        "extra": "<list>",
    }


def test_redact_for_log_bare_endpoint_and_other_values() -> None:
    assert redact_for_log("x" * 70, max_string=10) == "xxxxxxxxxx…<truncated>"
    assert redact_for_log(None) == "<NoneType>"
    assert redact_for_log(42) == "<int>"
