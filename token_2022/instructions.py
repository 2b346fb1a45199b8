"""Token-2022 mint extension instructions.

Every instruction here must be sent after the mint account is created and
before `initialize_mint2`, while the mint is still uninitialized.
"""

from enum import IntEnum
from typing import NamedTuple, Optional

from construct import Int8ul, Int16sl, Int16ul, Int64ul, Pass, Struct, Switch  # type: ignore

from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey

from codec.encoding import encode
from codec.layouts import OPTIONAL_NON_ZERO_PUBLIC_KEY_LAYOUT, OPTIONAL_PUBLIC_KEY_LAYOUT, PUBLIC_KEY_LAYOUT
from spl_token.constants import TOKEN_2022_PROGRAM_ID
from spl_token.instructions import InstructionType


class ExtensionInstructionType(IntEnum):
    """Sub-instruction of an extension instruction group."""

    INITIALIZE = 0


class TransferFeeConfigParams(NamedTuple):
    """Initialize the transfer fee extension of a mint."""

    mint: Pubkey
    """[w] The mint to initialize."""
    transfer_fee_config_authority: Optional[Pubkey]
    """Authority allowed to change the fee."""
    withdraw_withheld_authority: Optional[Pubkey]
    """Authority allowed to withdraw withheld fees."""
    transfer_fee_basis_points: int
    """Fee in basis points of the transferred amount."""
    maximum_fee: int
    """Maximum fee charged per transfer, in base units."""
    program_id: Pubkey = TOKEN_2022_PROGRAM_ID
    """Token-2022 program account."""


class InterestBearingMintParams(NamedTuple):
    """Initialize the interest bearing extension of a mint."""

    mint: Pubkey
    """[w] The mint to initialize."""
    rate_authority: Optional[Pubkey]
    """Authority allowed to update the rate."""
    rate: int
    """Interest rate in basis points, may be negative."""
    program_id: Pubkey = TOKEN_2022_PROGRAM_ID
    """Token-2022 program account."""


class TransferHookParams(NamedTuple):
    """Initialize the transfer hook extension of a mint."""

    mint: Pubkey
    """[w] The mint to initialize."""
    authority: Optional[Pubkey]
    """Authority allowed to change the hook program."""
    hook_program_id: Optional[Pubkey]
    """Program invoked on every transfer."""
    program_id: Pubkey = TOKEN_2022_PROGRAM_ID
    """Token-2022 program account."""


METADATA_POINTER_INITIALIZE_LAYOUT = Struct(
    "authority" / OPTIONAL_NON_ZERO_PUBLIC_KEY_LAYOUT,
    "metadata_address" / OPTIONAL_NON_ZERO_PUBLIC_KEY_LAYOUT,
)

TRANSFER_FEE_INITIALIZE_LAYOUT = Struct(
    "transfer_fee_config_authority" / OPTIONAL_PUBLIC_KEY_LAYOUT,
    "withdraw_withheld_authority" / OPTIONAL_PUBLIC_KEY_LAYOUT,
    "transfer_fee_basis_points" / Int16ul,
    "maximum_fee" / Int64ul,
)

INTEREST_BEARING_INITIALIZE_LAYOUT = Struct(
    "rate_authority" / OPTIONAL_NON_ZERO_PUBLIC_KEY_LAYOUT,
    "rate" / Int16sl,
)

TRANSFER_HOOK_INITIALIZE_LAYOUT = Struct(
    "authority" / OPTIONAL_NON_ZERO_PUBLIC_KEY_LAYOUT,
    "program_id" / OPTIONAL_NON_ZERO_PUBLIC_KEY_LAYOUT,
)


def _extension_layout(initialize_layout):
    return Struct(
        "extension_instruction_type" / Int8ul,
        "args"
        / Switch(
            lambda this: this.extension_instruction_type,
            {
                ExtensionInstructionType.INITIALIZE: initialize_layout,
            },
        ),
    )


INSTRUCTIONS_LAYOUT = Struct(
    "instruction_type" / Int8ul,
    "args"
    / Switch(
        lambda this: this.instruction_type,
        {
            InstructionType.INITIALIZE_MINT_CLOSE_AUTHORITY: Struct(
                "close_authority" / OPTIONAL_PUBLIC_KEY_LAYOUT
            ),
            InstructionType.TRANSFER_FEE_EXTENSION: _extension_layout(TRANSFER_FEE_INITIALIZE_LAYOUT),
            InstructionType.INITIALIZE_NON_TRANSFERABLE_MINT: Pass,
            InstructionType.INTEREST_BEARING_MINT_EXTENSION: _extension_layout(INTEREST_BEARING_INITIALIZE_LAYOUT),
            InstructionType.INITIALIZE_PERMANENT_DELEGATE: Struct(
                "delegate" / PUBLIC_KEY_LAYOUT
            ),
            InstructionType.TRANSFER_HOOK_EXTENSION: _extension_layout(TRANSFER_HOOK_INITIALIZE_LAYOUT),
            InstructionType.METADATA_POINTER_EXTENSION: _extension_layout(METADATA_POINTER_INITIALIZE_LAYOUT),
        },
    ),
)


def _mint_instruction(program_id: Pubkey, mint: Pubkey, instruction_type: InstructionType, args) -> Instruction:
    return Instruction(
        accounts=[
            AccountMeta(pubkey=mint, is_signer=False, is_writable=True),
        ],
        program_id=program_id,
        data=encode(
            INSTRUCTIONS_LAYOUT,
            dict(
                instruction_type=instruction_type,
                args=args,
            )
        )
    )


def _initialize(args) -> dict:
    return dict(extension_instruction_type=ExtensionInstructionType.INITIALIZE, args=args)


def initialize_mint_close_authority(
    mint: Pubkey,
    close_authority: Optional[Pubkey],
    program_id: Pubkey = TOKEN_2022_PROGRAM_ID,
) -> Instruction:
    """Creates a transaction instruction to set the authority allowed to close the mint."""
    return _mint_instruction(
        program_id, mint, InstructionType.INITIALIZE_MINT_CLOSE_AUTHORITY,
        dict(close_authority=close_authority),
    )


def initialize_metadata_pointer(
    mint: Pubkey,
    metadata_address: Optional[Pubkey],
    authority: Optional[Pubkey],
    program_id: Pubkey = TOKEN_2022_PROGRAM_ID,
) -> Instruction:
    """Creates a transaction instruction pointing the mint at the account holding its metadata.

    The metadata address may be the mint itself when the metadata is stored
    in the mint's own token-metadata extension.
    """
    return _mint_instruction(
        program_id, mint, InstructionType.METADATA_POINTER_EXTENSION,
        _initialize(dict(authority=authority, metadata_address=metadata_address)),
    )


def initialize_transfer_fee_config(params: TransferFeeConfigParams) -> Instruction:
    """Creates a transaction instruction to initialize the transfer fee configuration of a mint."""
    return _mint_instruction(
        params.program_id, params.mint, InstructionType.TRANSFER_FEE_EXTENSION,
        _initialize(dict(
            transfer_fee_config_authority=params.transfer_fee_config_authority,
            withdraw_withheld_authority=params.withdraw_withheld_authority,
            transfer_fee_basis_points=params.transfer_fee_basis_points,
            maximum_fee=params.maximum_fee,
        )),
    )


def initialize_interest_bearing_mint(params: InterestBearingMintParams) -> Instruction:
    """Creates a transaction instruction to initialize the interest rate of a mint."""
    return _mint_instruction(
        params.program_id, params.mint, InstructionType.INTEREST_BEARING_MINT_EXTENSION,
        _initialize(dict(rate_authority=params.rate_authority, rate=params.rate)),
    )


def initialize_transfer_hook(params: TransferHookParams) -> Instruction:
    """Creates a transaction instruction to initialize the transfer hook of a mint."""
    return _mint_instruction(
        params.program_id, params.mint, InstructionType.TRANSFER_HOOK_EXTENSION,
        _initialize(dict(authority=params.authority, program_id=params.hook_program_id)),
    )


def initialize_permanent_delegate(
    mint: Pubkey,
    delegate: Pubkey,
    program_id: Pubkey = TOKEN_2022_PROGRAM_ID,
) -> Instruction:
    """Creates a transaction instruction to set a delegate with unlimited authority over every account of the mint."""
    return _mint_instruction(
        program_id, mint, InstructionType.INITIALIZE_PERMANENT_DELEGATE,
        dict(delegate=delegate),
    )


def initialize_non_transferable_mint(mint: Pubkey, program_id: Pubkey = TOKEN_2022_PROGRAM_ID) -> Instruction:
    """Creates a transaction instruction to make tokens of the mint non-transferable."""
    return _mint_instruction(program_id, mint, InstructionType.INITIALIZE_NON_TRANSFERABLE_MINT, None)
