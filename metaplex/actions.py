"""Token metadata instructions for common asset operations."""

from typing import List, NamedTuple, Optional

from solders.instruction import Instruction
from solders.pubkey import Pubkey

from metaplex.asset import Asset
from metaplex.instructions import CreateBuilder, UpdateV1Builder
from metaplex.types import CreateArgs, Creator, Data, FungibleFields, TokenStandard
from spl_token.constants import TOKEN_PROGRAM_ID


class CreateFungibleArgs(NamedTuple):
    """Create a fungible mint together with its metadata."""

    mint: Pubkey
    """[ws] New mint account."""
    metadata: FungibleFields
    decimals: int
    immutable: bool
    """Whether the metadata can never be updated."""
    payer: Pubkey
    """[ws] Funding account, also mint and update authority."""


class CreateMetadataArgs(NamedTuple):
    """Create the metadata of an existing mint."""

    mint: str
    """Existing mint address, base58 encoded."""
    metadata: FungibleFields
    immutable: bool
    payer: Pubkey
    """[ws] Funding account, also mint and update authority."""


class UpdateMetaArgs(NamedTuple):
    """Replace the name, symbol, URI, royalties and creators of an asset."""

    payer: Pubkey
    """[ws] Funding account and update authority."""
    mint_account: Pubkey
    name: str
    symbol: str
    uri: str
    seller_fee_basis_points: int
    creators: Optional[List[Creator]] = None


def create_fungible_ix(args: CreateFungibleArgs) -> Instruction:
    """Creates a `Create` instruction that also initializes the mint, owned by the token program."""
    asset = Asset.new(args.mint)
    create_args = CreateArgs.from_data_v2(
        args.metadata.to_data_v2(),
        TokenStandard.FUNGIBLE,
        is_mutable=not args.immutable,
        decimals=args.decimals,
    )
    return CreateBuilder() \
        .metadata(asset.metadata) \
        .mint(args.mint, True) \
        .authority(args.payer) \
        .payer(args.payer) \
        .update_authority(args.payer, True) \
        .create_args(create_args) \
        .spl_token_program(TOKEN_PROGRAM_ID) \
        .instruction()


def create_metadata_ix(args: CreateMetadataArgs) -> Instruction:
    """Creates a `Create` instruction for the metadata of an already initialized mint.

    Raises `ValueError` if the mint address is malformed.
    """
    mint = Pubkey.from_string(args.mint)
    asset = Asset.new(mint)
    create_args = CreateArgs.from_data_v2(
        args.metadata.to_data_v2(),
        TokenStandard.FUNGIBLE,
        is_mutable=not args.immutable,
    )
    return CreateBuilder() \
        .metadata(asset.metadata) \
        .mint(mint, False) \
        .authority(args.payer) \
        .payer(args.payer) \
        .update_authority(args.payer, True) \
        .create_args(create_args) \
        .instruction()


def update_asset_v1_ix(args: UpdateMetaArgs) -> Instruction:
    """Creates an `UpdateV1` instruction replacing the asset data, the payer acting as update authority."""
    asset = Asset.new(args.mint_account)
    data = Data(
        name=args.name,
        symbol=args.symbol,
        uri=args.uri,
        seller_fee_basis_points=args.seller_fee_basis_points,
        creators=args.creators,
    )
    return UpdateV1Builder() \
        .authority(args.payer) \
        .mint(asset.mint) \
        .metadata(asset.metadata) \
        .edition(asset.edition) \
        .payer(args.payer) \
        .data(data) \
        .instruction()
