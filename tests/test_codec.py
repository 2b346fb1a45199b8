import pytest
import borsh_construct as borsh
from construct import Int16ul, Int64ul, Struct

from solders.pubkey import Pubkey

from codec.encoding import decode, encode, packed_len
from codec.errors import CodecError
from codec.layouts import (
    BINCODE_STRING,
    BORSH_STRING,
    OPTIONAL_NON_ZERO_PUBLIC_KEY_LAYOUT,
    OPTIONAL_PUBLIC_KEY_LAYOUT,
    PUBLIC_KEY_LAYOUT,
)
from codec.toggle import Toggle, ToggleKind, toggle_layout


def test_public_key_has_no_prefix():
    key = Pubkey.new_unique()
    assert encode(PUBLIC_KEY_LAYOUT, key) == bytes(key)
    assert decode(PUBLIC_KEY_LAYOUT, bytes(key)) == key


def test_optional_public_key():
    key = Pubkey.new_unique()
    assert encode(OPTIONAL_PUBLIC_KEY_LAYOUT, None) == b"\x00"
    assert encode(OPTIONAL_PUBLIC_KEY_LAYOUT, key) == b"\x01" + bytes(key)
    assert decode(OPTIONAL_PUBLIC_KEY_LAYOUT, b"\x01" + bytes(key)) == key
    assert decode(OPTIONAL_PUBLIC_KEY_LAYOUT, b"\x00") is None


def test_optional_non_zero_public_key():
    key = Pubkey.new_unique()
    assert encode(OPTIONAL_NON_ZERO_PUBLIC_KEY_LAYOUT, None) == bytes(32)
    assert encode(OPTIONAL_NON_ZERO_PUBLIC_KEY_LAYOUT, key) == bytes(key)
    assert decode(OPTIONAL_NON_ZERO_PUBLIC_KEY_LAYOUT, bytes(32)) is None
    assert decode(OPTIONAL_NON_ZERO_PUBLIC_KEY_LAYOUT, bytes(key)) == key


def test_string_prefixes():
    assert encode(BORSH_STRING, "abc") == b"\x03\x00\x00\x00abc"
    assert encode(BINCODE_STRING, "abc") == b"\x03\x00\x00\x00\x00\x00\x00\x00abc"
    assert decode(BORSH_STRING, b"\x03\x00\x00\x00abc") == "abc"
    assert decode(BINCODE_STRING, b"\x03\x00\x00\x00\x00\x00\x00\x00abc") == "abc"


def test_scalars_and_sequences_round_trip():
    layout = borsh.CStruct(
        "small" / borsh.U8,
        "signed" / borsh.I16,
        "large" / borsh.U64,
        "flag" / borsh.Bool,
        "maybe" / borsh.Option(borsh.U32),
        "numbers" / borsh.Vec(borsh.U16),
        "name" / BORSH_STRING,
    )
    value = dict(small=255, signed=-300, large=2**64 - 1, flag=True, maybe=None, numbers=[1, 2, 3], name="é")
    parsed = decode(layout, encode(layout, value))
    assert parsed.small == 255
    assert parsed.signed == -300
    assert parsed.large == 2**64 - 1
    assert parsed.flag is True
    assert parsed.maybe is None
    assert list(parsed.numbers) == [1, 2, 3]
    assert parsed.name == "é"


def test_little_endian_fixed_width():
    assert encode(Int16ul, 10000) == b"\x10\x27"
    assert encode(Int64ul, 1) == b"\x01" + bytes(7)


def test_decode_rejects_trailing_bytes():
    with pytest.raises(CodecError):
        decode(Int16ul, b"\x01\x00\x00")


def test_decode_rejects_insufficient_bytes():
    layout = Struct("a" / Int64ul)
    with pytest.raises(CodecError):
        decode(layout, b"\x01\x02")


def test_encode_rejects_out_of_range():
    with pytest.raises(CodecError):
        encode(Int16ul, 2**16)
    with pytest.raises(CodecError):
        encode(Int64ul, -1)


def test_packed_len_matches_encode():
    layout = borsh.CStruct("name" / BORSH_STRING, "items" / borsh.Vec(borsh.U64))
    value = dict(name="metadata", items=[1, 2])
    assert packed_len(layout, value) == len(encode(layout, value)) == 4 + 8 + 4 + 16


def test_toggle_defaults_to_unchanged():
    assert Toggle() == Toggle.unchanged()
    assert Toggle().is_unchanged
    assert not Toggle.clear().is_unchanged


def test_toggle_set_requires_value():
    with pytest.raises(ValueError):
        Toggle.set(None)


def test_toggle_encoding():
    layout = toggle_layout(Int64ul)
    assert encode(layout, Toggle.unchanged().as_container()) == b"\x00"
    assert encode(layout, Toggle.clear().as_container()) == b"\x01"
    assert encode(layout, Toggle.set(7).as_container()) == b"\x02" + (7).to_bytes(8, "little")
    assert Toggle.decode_container(decode(layout, b"\x02" + (7).to_bytes(8, "little"))) == Toggle.set(7)
    assert Toggle.decode_container(decode(layout, b"\x01")) == Toggle(ToggleKind.CLEAR)


def test_toggle_rejects_unknown_tag():
    with pytest.raises(CodecError):
        decode(toggle_layout(Int64ul), b"\x07")
