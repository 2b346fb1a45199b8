import pytest

from solders.instruction import AccountMeta
from solders.pubkey import Pubkey

from codec.encoding import decode
from codec.errors import CodecError
from spl_token.constants import TOKEN_2022_PROGRAM_ID
from token_metadata.instructions import (
    INITIALIZE_DISCRIMINATOR,
    INSTRUCTIONS_LAYOUT,
    UPDATE_FIELD_DISCRIMINATOR,
    Field,
    initialize,
    update_field,
)
from token_metadata.state import TLV_HEADER_LEN, TokenMetadata


def test_discriminators():
    assert INITIALIZE_DISCRIMINATOR.hex() == "d2e11ea258b84d8d"
    assert UPDATE_FIELD_DISCRIMINATOR.hex() == "dde9312db5cadcc8"


def test_initialize(mint, payer):
    ix = initialize(
        metadata=mint, update_authority=payer, mint=mint, mint_authority=payer,
        name="Token", symbol="TKN", uri="https://example.com")
    assert ix.program_id == TOKEN_2022_PROGRAM_ID
    assert ix.data.startswith(INITIALIZE_DISCRIMINATOR)
    assert ix.data[8:] == b"\x05\x00\x00\x00Token" + b"\x03\x00\x00\x00TKN" + \
        b"\x13\x00\x00\x00https://example.com"


@pytest.mark.parametrize("field,encoded", [
    (Field.NAME, b"\x00"),
    (Field.SYMBOL, b"\x01"),
    (Field.URI, b"\x02"),
    ("color", b"\x03\x05\x00\x00\x00color"),
])
def test_update_field(mint, payer, field, encoded):
    ix = update_field(metadata=mint, update_authority=payer, field=field, value="red")
    assert ix.data == UPDATE_FIELD_DISCRIMINATOR + encoded + b"\x03\x00\x00\x00red"
    assert ix.accounts == [
        AccountMeta(pubkey=mint, is_signer=False, is_writable=True),
        AccountMeta(pubkey=payer, is_signer=True, is_writable=False),
    ]


def test_update_field_requires_key_string(mint, payer):
    with pytest.raises(ValueError):
        update_field(metadata=mint, update_authority=payer, field=Field.KEY, value="x")


def test_token_metadata_round_trip(mint, payer):
    metadata = TokenMetadata(
        update_authority=payer, mint=mint, name="n", symbol="s", uri="u",
        additional_metadata=(("k", "v"), ("k2", "v2")))
    assert TokenMetadata.decode(metadata.encode()) == metadata


def test_token_metadata_round_trip_with_default_pairs(mint, payer):
    metadata = TokenMetadata(update_authority=payer, mint=mint, name="n", symbol="s", uri="u")
    decoded = TokenMetadata.decode(metadata.encode())
    assert decoded == metadata
    assert decoded.additional_metadata == ()


def test_token_metadata_without_update_authority(mint):
    metadata = TokenMetadata(update_authority=None, mint=mint, name="", symbol="", uri="", additional_metadata=())
    data = metadata.encode()
    assert data[:32] == bytes(32)
    assert TokenMetadata.decode(data) == metadata


def test_tlv_size_of(mint, payer):
    metadata = TokenMetadata(update_authority=payer, mint=mint, name="X", symbol="X", uri="u")
    assert metadata.tlv_size_of() == TLV_HEADER_LEN + len(metadata.encode()) == 93


def test_decode_rejects_trailing_bytes(mint, payer):
    metadata = TokenMetadata(update_authority=payer, mint=mint, name="X", symbol="X", uri="u")
    with pytest.raises(CodecError):
        TokenMetadata.decode(metadata.encode() + b"\x00")


def test_decode_rejects_unknown_field_and_discriminator():
    with pytest.raises(CodecError):
        decode(INSTRUCTIONS_LAYOUT, UPDATE_FIELD_DISCRIMINATOR + bytes([9]) + b"\x00\x00\x00\x00")
    with pytest.raises(CodecError):
        decode(INSTRUCTIONS_LAYOUT, bytes(8))


def test_update_field_decodes(mint, payer):
    parsed = decode(INSTRUCTIONS_LAYOUT, update_field(mint, payer, Field.URI, "u").data)
    assert parsed.args.field.field_type == Field.URI
    assert parsed.args.value == "u"
