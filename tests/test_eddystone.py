from __future__ import annotations

import pytest

from beaconscan.decoders import eddystone

UID = "00" + "e7" + "0102030405060708090a" + "0b0c0d0e0f10"
TLM = bytes([0x20, 0x00, 0x0B, 0xB8, 0x01, 0x90, 0x00, 0x00, 0x00, 0x05, 0x00, 0x00, 0x00, 0x0A])


def test_uid_accepts_18_and_20_bytes() -> None:
    for frame in (UID, UID + "0000"):
        payload = eddystone.decode_uid(bytes.fromhex(frame))
        assert payload is not None
        assert payload.tx_power == -25
        assert payload.namespace == "0102030405060708090A"
        assert payload.instance == "0B0C0D0E0F10"


@pytest.mark.parametrize("length", [17, 19, 21])
def test_uid_rejects_other_lengths(length: int) -> None:
    frame = bytes.fromhex(UID + "0000" + "00")[:length]
    assert eddystone.decode_uid(frame) is None


def test_url_expands_scheme_and_suffix() -> None:
    frame = bytes.fromhex("10" + "ba" + "00") + b"example" + b"\x00"
    payload = eddystone.decode_url(frame)
    assert payload is not None
    assert payload.url == "http://www.example.com/"
    assert payload.tx_power == -70


def test_url_expands_tokens_mid_string() -> None:
    frame = bytes.fromhex("10" + "00" + "03") + b"goo" + b"\x0d" + b"/x"
    payload = eddystone.decode_url(frame)
    assert payload is not None
    assert payload.url == "https://goo.gov/x"


def test_url_unknown_scheme_or_short_frame() -> None:
    assert eddystone.decode_url(bytes.fromhex("1000") + b"\x04abc") is None
    assert eddystone.decode_url(bytes.fromhex("100000")) is None


def test_tlm_fields() -> None:
    payload = eddystone.decode_tlm(TLM)
    assert payload is not None
    assert payload.battery_voltage == 3000
    assert payload.temperature == 1.5625
    assert payload.adv_cnt == 5
    assert payload.sec_cnt == 10


def test_tlm_negative_temperature() -> None:
    frame = TLM[:4] + bytes([0xFF, 0x80]) + TLM[6:]
    payload = eddystone.decode_tlm(frame)
    assert payload is not None
    assert payload.temperature == -0.5


def test_tlm_rejects_other_versions_and_lengths() -> None:
    assert eddystone.decode_tlm(TLM[:1] + b"\x01" + TLM[2:]) is None
    assert eddystone.decode_tlm(TLM[:13]) is None
    assert eddystone.decode_tlm(TLM + b"\x00") is None


def test_eid() -> None:
    payload = eddystone.decode_eid(bytes.fromhex("30" + "f6" + "0102030405060708"))
    assert payload is not None
    assert payload.tx_power == -10
    assert payload.eid == "0102030405060708"
    assert eddystone.decode_eid(bytes.fromhex("30" + "f6" + "01020304050607")) is None
