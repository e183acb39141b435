import pytest

from copynfc.core.smartcard.atr import card_name, classify, historical_bytes, tag_historical_bytes
from copynfc.core.tag import TagFamily

ULTRALIGHT = bytes.fromhex("3B8F8001804F0CA0000003060300030000000068")
CLASSIC_1K = bytes.fromhex("3B8F8001804F0CA000000306030001000000006A")
FELICA = bytes.fromhex("3B8F8001804F0CA00000030611003B0000000000")
ICODE_SLI = bytes.fromhex("3B8F8001804F0CA0000003060B00140000000000")
DESFIRE = bytes.fromhex("3B8180018080")
CONTACT = bytes.fromhex("3B021450")


def test_historical_bytes_of_storage_card():
    hist = historical_bytes(ULTRALIGHT)
    assert len(hist) == 15
    assert hist[:3] == b"\x80\x4F\x0C"


def test_historical_bytes_without_interface_bytes():
    assert historical_bytes(CONTACT) == b"\x14\x50"


@pytest.mark.parametrize("atr", [b"", b"\x3B", bytes.fromhex("3B8F80"), bytes.fromhex("3B0214")])
def test_truncated_atr(atr):
    with pytest.raises(ValueError):
        historical_bytes(atr)
    assert classify(atr) is TagFamily.UNKNOWN


@pytest.mark.parametrize(
    "atr, family",
    [
        (ULTRALIGHT, TagFamily.MIFARE),
        (CLASSIC_1K, TagFamily.MIFARE),
        (FELICA, TagFamily.FELICA),
        (ICODE_SLI, TagFamily.ISO15693),
        (DESFIRE, TagFamily.ISO7816),
        (CONTACT, TagFamily.UNKNOWN),
    ],
)
def test_classify(atr, family):
    assert classify(atr) is family


def test_card_name():
    assert card_name(ULTRALIGHT) == "MIFARE Ultralight"
    assert card_name(ICODE_SLI) == "card 0014"
    assert card_name(DESFIRE) is None


def test_tag_historical_bytes():
    assert tag_historical_bytes(ULTRALIGHT) is None
    assert tag_historical_bytes(DESFIRE) == b"\x80"
    assert tag_historical_bytes(b"") is None
