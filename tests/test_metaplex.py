import logging

import pytest

from solders.instruction import AccountMeta
from solders.pubkey import Pubkey
from solders.sysvar import INSTRUCTIONS

from accounts.errors import MissingFieldError
from codec.encoding import decode, encode
from codec.errors import CodecError
from codec.toggle import Toggle
from metaplex.actions import (
    CreateFungibleArgs,
    CreateMetadataArgs,
    UpdateMetaArgs,
    create_fungible_ix,
    create_metadata_ix,
    update_asset_v1_ix,
)
from metaplex.asset import Asset
from metaplex.constants import (
    METADATA_PROGRAM_ID,
    find_master_edition_account,
    find_metadata_account,
    find_token_record_account,
)
from metaplex.instructions import INSTRUCTIONS_LAYOUT, CreateBuilder, UpdateV1Builder
from metaplex.types import (
    AUTHORIZATION_DATA_LAYOUT,
    COLLECTION_DETAILS_LAYOUT,
    CREATE_ARGS_LAYOUT,
    DATA_V2_LAYOUT,
    PAYLOAD_TYPE_LAYOUT,
    PRINT_SUPPLY_LAYOUT,
    AuthorizationData,
    Collection,
    CollectionDetails,
    CreateArgs,
    Creator,
    DataV2,
    FungibleFields,
    PayloadType,
    PrintSupply,
    TokenStandard,
    UseMethod,
    Uses,
)
from spl_token.constants import TOKEN_PROGRAM_ID
from system.constants import SYSTEM_PROGRAM_ID

PLACEHOLDER = AccountMeta(pubkey=METADATA_PROGRAM_ID, is_signer=False, is_writable=False)
FIELDS = FungibleFields(name="Coin", symbol="CN", uri="https://example.com/coin.json")


def test_pdas(mint):
    (metadata, bump) = find_metadata_account(mint)
    assert metadata == Pubkey.create_program_address(
        [b"metadata", bytes(METADATA_PROGRAM_ID), bytes(mint), bytes([bump])], METADATA_PROGRAM_ID)
    (edition, bump) = find_master_edition_account(mint)
    assert edition == Pubkey.create_program_address(
        [b"metadata", bytes(METADATA_PROGRAM_ID), bytes(mint), b"edition", bytes([bump])], METADATA_PROGRAM_ID)
    token = Pubkey.new_unique()
    (record, bump) = find_token_record_account(mint, token)
    assert record == Pubkey.create_program_address(
        [b"metadata", bytes(METADATA_PROGRAM_ID), bytes(mint), b"token_record", bytes(token), bytes([bump])],
        METADATA_PROGRAM_ID)


def test_asset(mint):
    asset = Asset.new(mint)
    assert asset.metadata == find_metadata_account(mint)[0]
    assert asset.edition is None
    assert asset.with_edition().edition == find_master_edition_account(mint)[0]
    token = Pubkey.new_unique()
    assert asset.get_token_record(token) == find_token_record_account(mint, token)[0]


def test_create_fungible_placeholders(mint, payer):
    ix = create_fungible_ix(CreateFungibleArgs(
        mint=mint, metadata=FIELDS, decimals=9, immutable=False, payer=payer))
    assert ix.program_id == METADATA_PROGRAM_ID
    assert ix.accounts == [
        AccountMeta(pubkey=find_metadata_account(mint)[0], is_signer=False, is_writable=True),
        PLACEHOLDER,
        AccountMeta(pubkey=mint, is_signer=True, is_writable=True),
        AccountMeta(pubkey=payer, is_signer=True, is_writable=False),
        AccountMeta(pubkey=payer, is_signer=True, is_writable=True),
        AccountMeta(pubkey=payer, is_signer=True, is_writable=False),
        AccountMeta(pubkey=SYSTEM_PROGRAM_ID, is_signer=False, is_writable=False),
        AccountMeta(pubkey=INSTRUCTIONS, is_signer=False, is_writable=False),
        AccountMeta(pubkey=TOKEN_PROGRAM_ID, is_signer=False, is_writable=False),
    ]


def test_create_fungible_data(mint, payer):
    ix = create_fungible_ix(CreateFungibleArgs(
        mint=mint, metadata=FIELDS, decimals=9, immutable=True, payer=payer))
    assert ix.data[:2] == bytes([42, 0])
    parsed = decode(INSTRUCTIONS_LAYOUT, ix.data)
    create_args = CreateArgs.decode_container(parsed.args)
    assert create_args == CreateArgs(
        name="Coin",
        symbol="CN",
        uri="https://example.com/coin.json",
        seller_fee_basis_points=0,
        token_standard=TokenStandard.FUNGIBLE,
        is_mutable=False,
        decimals=9,
    )
    # flags, token standard, then absent options except decimals
    assert ix.data.endswith(bytes([0, 0, 2, 0, 0, 0, 0, 1, 9, 0]))


def test_create_metadata(payer):
    mint = Pubkey.new_unique()
    ix = create_metadata_ix(CreateMetadataArgs(mint=str(mint), metadata=FIELDS, immutable=False, payer=payer))
    assert len(ix.accounts) == 9
    assert ix.accounts[1] == PLACEHOLDER
    assert ix.accounts[2] == AccountMeta(pubkey=mint, is_signer=False, is_writable=True)
    assert ix.accounts[8] == PLACEHOLDER
    assert ix.data.endswith(bytes([0, 1, 2, 0, 0, 0, 0, 0, 0]))


def test_create_metadata_rejects_malformed_mint(payer):
    with pytest.raises(ValueError):
        create_metadata_ix(CreateMetadataArgs(mint="0OIl", metadata=FIELDS, immutable=False, payer=payer))


def test_create_builder_master_edition(mint, payer):
    edition = find_master_edition_account(mint)[0]
    ix = CreateBuilder() \
        .metadata(find_metadata_account(mint)[0]) \
        .master_edition(edition) \
        .mint(mint, False) \
        .authority(payer) \
        .payer(payer) \
        .update_authority(payer, False) \
        .create_args(CreateArgs.from_data_v2(FIELDS.to_data_v2(), TokenStandard.NON_FUNGIBLE)) \
        .instruction()
    assert ix.accounts[1] == AccountMeta(pubkey=edition, is_signer=False, is_writable=True)
    assert ix.accounts[5] == AccountMeta(pubkey=payer, is_signer=False, is_writable=False)


def test_create_builder_missing_fields(mint, payer):
    builder = CreateBuilder()
    with pytest.raises(MissingFieldError) as e:
        builder.instruction()
    assert e.value.name == "create_args"
    builder.create_args(CreateArgs.from_data_v2(FIELDS.to_data_v2(), TokenStandard.FUNGIBLE))
    builder.mint(mint, True).authority(payer).payer(payer).update_authority(payer, True)
    with pytest.raises(MissingFieldError) as e:
        builder.instruction()
    assert e.value.name == "metadata"


def test_create_builder_remaining_accounts(mint, payer):
    extra = [AccountMeta(pubkey=Pubkey.new_unique(), is_signer=False, is_writable=False) for _ in range(2)]
    ix = CreateBuilder() \
        .metadata(find_metadata_account(mint)[0]) \
        .mint(mint, True) \
        .authority(payer) \
        .payer(payer) \
        .update_authority(payer, True) \
        .create_args(CreateArgs.from_data_v2(FIELDS.to_data_v2(), TokenStandard.FUNGIBLE)) \
        .add_remaining_account(extra[0]) \
        .add_remaining_accounts(extra[1:]) \
        .instruction()
    assert ix.accounts[9:] == extra


def test_create_args_full_round_trip(payer):
    create_args = CreateArgs(
        name="Art",
        symbol="ART",
        uri="u",
        seller_fee_basis_points=500,
        token_standard=TokenStandard.PROGRAMMABLE_NON_FUNGIBLE,
        creators=[Creator(address=payer, verified=True, share=100)],
        primary_sale_happened=True,
        collection=Collection(verified=False, key=Pubkey.new_unique()),
        uses=Uses(use_method=UseMethod.MULTIPLE, remaining=3, total=5),
        collection_details=CollectionDetails.v1(10),
        rule_set=Pubkey.new_unique(),
        decimals=0,
        print_supply=PrintSupply.limited(7),
    )
    data = encode(CREATE_ARGS_LAYOUT, create_args.as_container())
    assert CreateArgs.decode_container(decode(CREATE_ARGS_LAYOUT, data)) == create_args


def test_data_v2_round_trip(payer):
    data_v2 = DataV2(
        name="n", symbol="s", uri="u", seller_fee_basis_points=10000,
        creators=[Creator(address=payer, verified=False, share=100)],
        uses=Uses(use_method=UseMethod.BURN, remaining=1, total=1),
    )
    data = encode(DATA_V2_LAYOUT, data_v2.as_container())
    assert DataV2.decode_container(decode(DATA_V2_LAYOUT, data)) == data_v2


def test_update_asset_v1(mint, payer):
    ix = update_asset_v1_ix(UpdateMetaArgs(
        payer=payer, mint_account=mint, name="New", symbol="NEW", uri="u", seller_fee_basis_points=100))
    assert ix.program_id == METADATA_PROGRAM_ID
    assert ix.accounts == [
        AccountMeta(pubkey=payer, is_signer=True, is_writable=False),
        PLACEHOLDER,
        PLACEHOLDER,
        AccountMeta(pubkey=mint, is_signer=False, is_writable=False),
        AccountMeta(pubkey=find_metadata_account(mint)[0], is_signer=False, is_writable=True),
        PLACEHOLDER,
        AccountMeta(pubkey=payer, is_signer=True, is_writable=True),
        AccountMeta(pubkey=SYSTEM_PROGRAM_ID, is_signer=False, is_writable=False),
        AccountMeta(pubkey=INSTRUCTIONS, is_signer=False, is_writable=False),
        PLACEHOLDER,
        PLACEHOLDER,
    ]
    expected = bytes([50, 0, 0, 1]) + \
        b"\x03\x00\x00\x00New" + b"\x03\x00\x00\x00NEW" + b"\x01\x00\x00\x00u" + \
        (100).to_bytes(2, "little") + b"\x00" + \
        bytes([0, 0]) + bytes([0, 0, 0, 0]) + b"\x00"
    assert ix.data == expected


def test_update_v1_toggles(mint, payer):
    collection = Pubkey.new_unique()
    rule_set = Pubkey.new_unique()
    ix = UpdateV1Builder() \
        .authority(payer) \
        .mint(mint) \
        .metadata(find_metadata_account(mint)[0]) \
        .payer(payer) \
        .collection(Toggle.set(Collection(verified=False, key=collection))) \
        .collection_details(Toggle.clear()) \
        .rule_set(Toggle.set(rule_set)) \
        .instruction()
    assert ix.data == bytes([50, 0, 0, 0, 0, 0]) + \
        bytes([2, 0]) + bytes(collection) + \
        bytes([1]) + \
        bytes([0]) + \
        bytes([2]) + bytes(rule_set) + \
        bytes([0])


def test_update_v1_missing_account(mint):
    with pytest.raises(MissingFieldError) as e:
        UpdateV1Builder().mint(mint).instruction()
    assert e.value.name == "authority"


def test_update_v1_authorization_data(mint, payer):
    authorization_data = AuthorizationData(payload={
        "b": PayloadType.number(5),
        "a": PayloadType.seeds([b"x", b"yz"]),
    })
    encoded = encode(AUTHORIZATION_DATA_LAYOUT, authorization_data.as_container())
    assert encoded == (2).to_bytes(4, "little") + \
        b"\x01\x00\x00\x00a" + bytes([1]) + (2).to_bytes(4, "little") + \
        b"\x01\x00\x00\x00x" + b"\x02\x00\x00\x00yz" + \
        b"\x01\x00\x00\x00b" + bytes([3]) + (5).to_bytes(8, "little")
    assert AuthorizationData.decode_container(decode(AUTHORIZATION_DATA_LAYOUT, encoded)) == authorization_data
    ix = UpdateV1Builder() \
        .authority(payer) \
        .mint(mint) \
        .metadata(find_metadata_account(mint)[0]) \
        .payer(payer) \
        .authorization_data(authorization_data) \
        .instruction()
    assert ix.data.endswith(b"\x01" + encoded)


def test_placeholder_substitution_is_logged(mint, payer, caplog):
    with caplog.at_level(logging.DEBUG, logger="metaplex.instructions"):
        create_metadata_ix(CreateMetadataArgs(mint=str(mint), metadata=FIELDS, immutable=False, payer=payer))
    assert "master_edition not set" in caplog.text
    assert "spl_token_program not set" in caplog.text


@pytest.mark.parametrize("layout,data", [
    (CREATE_ARGS_LAYOUT, bytes([1])),
    (PRINT_SUPPLY_LAYOUT, bytes([3])),
    (COLLECTION_DETAILS_LAYOUT, bytes([2]) + bytes(8)),
    (PAYLOAD_TYPE_LAYOUT, bytes([4])),
    (INSTRUCTIONS_LAYOUT, bytes([43])),
])
def test_unknown_variant_tags_are_rejected(layout, data):
    with pytest.raises(CodecError):
        decode(layout, data)
