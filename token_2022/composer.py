"""Composes the instruction sequence creating a token-2022 mint with extensions."""

import logging
from typing import List, NamedTuple, Optional, Sequence, Union

from solders.instruction import Instruction
from solders.pubkey import Pubkey

from spl_token.constants import TOKEN_2022_PROGRAM_ID
from spl_token.instructions import InitializeMintParams, initialize_mint2
from system.constants import minimum_balance_for_rent_exemption
from system.instructions import CreateAccountParams, create_account
from token_2022.extensions import ExtensionType, Fungible22Fields, MetadataConfig, get_mint_len
from token_metadata.instructions import initialize as initialize_metadata, update_field
from token_metadata.state import TokenMetadata

logger = logging.getLogger(__name__)


class MintExtensionPlan(NamedTuple):
    """Account sizing and extension instructions for a new mint."""

    extension_types: List[ExtensionType]
    """Fixed-size extensions, in request order."""
    mint_space: int
    """Account length to allocate, covering the base mint and fixed-size extensions."""
    variable_len: int
    """Bytes the variable-length token metadata entry will add after initialization."""
    pre_init: List[Instruction]
    """Instructions to send before `initialize_mint2`, in request order."""
    post_init: List[Instruction]
    """Instructions to send after `initialize_mint2`."""


class CreateFungible22Args(NamedTuple):
    """Create a token-2022 fungible mint with extensions."""

    mint: Pubkey
    """[ws] New mint account."""
    extensions: Union[Fungible22Fields, Sequence[NamedTuple]]
    """Requested extensions, or extension descriptors in the order their instructions are emitted."""
    decimals: int
    """Number of base 10 digits to the right of the decimal place."""
    payer: Pubkey
    """[ws] Funding account, also mint, freeze and metadata authority."""
    mint_rent: Optional[int] = None
    """Lamports to fund the mint with, computed from default rent when unset."""


def _metadata_post_init(config: MetadataConfig, mint: Pubkey, payer: Pubkey) -> List[Instruction]:
    instructions = [
        initialize_metadata(
            metadata=mint,
            update_authority=payer,
            mint=mint,
            mint_authority=payer,
            name=config.name,
            symbol=config.symbol,
            uri=config.uri,
        )
    ]
    for (key, value) in config.additional_metadata:
        instructions.append(update_field(metadata=mint, update_authority=payer, field=key, value=value))
    return instructions


def plan_mint_extensions(mint: Pubkey, payer: Pubkey, descriptors: Sequence) -> MintExtensionPlan:
    """Sizes the mint and builds each extension's instructions.

    Extension instructions are emitted in the order the descriptors are given.
    The payer is the authority of the metadata pointer and the token metadata.
    """
    extension_types: List[ExtensionType] = []
    pre_init: List[Instruction] = []
    post_init: List[Instruction] = []
    variable_len = 0
    for descriptor in descriptors:
        extension_types.append(descriptor.extension_type)
        pre_init.append(descriptor.initialize_instruction(mint, payer))
        if isinstance(descriptor, MetadataConfig):
            token_metadata = TokenMetadata(
                update_authority=payer,
                mint=mint,
                name=descriptor.name,
                symbol=descriptor.symbol,
                uri=descriptor.uri,
                additional_metadata=tuple(descriptor.additional_metadata),
            )
            variable_len += token_metadata.tlv_size_of()
            post_init.extend(_metadata_post_init(descriptor, mint, payer))
    mint_space = get_mint_len(extension_types)
    logger.debug(
        "Planned mint %s with extensions %s, space %d, metadata %d bytes",
        mint, [extension_type.name for extension_type in extension_types], mint_space, variable_len,
    )
    return MintExtensionPlan(
        extension_types=extension_types,
        mint_space=mint_space,
        variable_len=variable_len,
        pre_init=pre_init,
        post_init=post_init,
    )


def create_fungible_22_ix(args: CreateFungible22Args) -> List[Instruction]:
    """Creates the instructions for a new token-2022 fungible mint.

    The sequence is the account creation, the extension initializations,
    `initialize_mint2`, then the token metadata initialization followed by
    one field update per additional metadata pair. The payer is set as mint
    and freeze authority.
    """
    if isinstance(args.extensions, Fungible22Fields):
        descriptors = args.extensions.descriptors()
    else:
        descriptors = list(args.extensions)
    plan = plan_mint_extensions(args.mint, args.payer, descriptors)
    lamports = args.mint_rent
    if lamports is None:
        lamports = minimum_balance_for_rent_exemption(plan.mint_space + plan.variable_len)
    logger.debug("Funding mint %s with %d lamports", args.mint, lamports)

    instructions = [
        create_account(
            CreateAccountParams(
                from_pubkey=args.payer,
                to_pubkey=args.mint,
                lamports=lamports,
                space=plan.mint_space,
                owner=TOKEN_2022_PROGRAM_ID,
            )
        )
    ]
    instructions.extend(plan.pre_init)
    instructions.append(
        initialize_mint2(
            InitializeMintParams(
                program_id=TOKEN_2022_PROGRAM_ID,
                mint=args.mint,
                decimals=args.decimals,
                mint_authority=args.payer,
                freeze_authority=args.payer,
            )
        )
    )
    instructions.extend(plan.post_init)
    return instructions
