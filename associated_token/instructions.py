"""Associated Token Account Instructions."""

from enum import IntEnum
from typing import NamedTuple

from construct import Int8ul, Struct  # type: ignore

from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey

from associated_token.constants import ASSOCIATED_TOKEN_PROGRAM_ID, TOKEN_PROGRAM_ID, get_associated_token_address
from codec.encoding import encode
from system.constants import SYSTEM_PROGRAM_ID


class InstructionType(IntEnum):
    """Associated Token Account Instruction Types."""

    CREATE = 0
    CREATE_IDEMPOTENT = 1
    RECOVER_NESTED = 2


INSTRUCTIONS_LAYOUT = Struct(
    "instruction_type" / Int8ul,
)


class RecoverNestedParams(NamedTuple):
    """Recover tokens and lamports from an associated token account owned by another associated token account."""

    wallet_address: Pubkey
    """[ws] Wallet owning the owner associated token account, receives the lamports."""
    owner_token_mint_address: Pubkey
    """[] Mint of the owner associated token account."""
    nested_token_mint_address: Pubkey
    """[] Mint of the nested associated token account."""
    token_program_id: Pubkey = TOKEN_PROGRAM_ID
    """SPL Token program account."""


def _build_create(
    instruction_type: InstructionType,
    funding_address: Pubkey,
    wallet_address: Pubkey,
    token_mint_address: Pubkey,
    token_program_id: Pubkey,
) -> Instruction:
    associated_account_address = get_associated_token_address(
        wallet_address, token_mint_address, token_program_id)
    return Instruction(
        accounts=[
            AccountMeta(pubkey=funding_address, is_signer=True, is_writable=True),
            AccountMeta(pubkey=associated_account_address, is_signer=False, is_writable=True),
            AccountMeta(pubkey=wallet_address, is_signer=False, is_writable=False),
            AccountMeta(pubkey=token_mint_address, is_signer=False, is_writable=False),
            AccountMeta(pubkey=SYSTEM_PROGRAM_ID, is_signer=False, is_writable=False),
            AccountMeta(pubkey=token_program_id, is_signer=False, is_writable=False),
        ],
        program_id=ASSOCIATED_TOKEN_PROGRAM_ID,
        data=encode(INSTRUCTIONS_LAYOUT, dict(instruction_type=instruction_type)),
    )


def create_associated_token_account(
    funding_address: Pubkey,
    wallet_address: Pubkey,
    token_mint_address: Pubkey,
    token_program_id: Pubkey = TOKEN_PROGRAM_ID,
) -> Instruction:
    """Creates a transaction instruction to create the associated token account of a wallet.

    Fails on-chain if the account already exists.
    """
    return _build_create(
        InstructionType.CREATE, funding_address, wallet_address, token_mint_address, token_program_id)


def create_associated_token_account_idempotent(
    funding_address: Pubkey,
    wallet_address: Pubkey,
    token_mint_address: Pubkey,
    token_program_id: Pubkey = TOKEN_PROGRAM_ID,
) -> Instruction:
    """Creates a transaction instruction to create the associated token account of a wallet if it does not exist.

    Fails on-chain only if the account exists with a different owner.
    """
    return _build_create(
        InstructionType.CREATE_IDEMPOTENT, funding_address, wallet_address, token_mint_address, token_program_id)


def recover_nested(params: RecoverNestedParams) -> Instruction:
    """Creates a transaction instruction to move tokens out of a nested associated token account and close it."""
    owner_associated_account_address = get_associated_token_address(
        params.wallet_address, params.owner_token_mint_address, params.token_program_id)
    destination_associated_account_address = get_associated_token_address(
        params.wallet_address, params.nested_token_mint_address, params.token_program_id)
    nested_associated_account_address = get_associated_token_address(
        owner_associated_account_address, params.nested_token_mint_address, params.token_program_id)
    return Instruction(
        accounts=[
            AccountMeta(pubkey=nested_associated_account_address, is_signer=False, is_writable=True),
            AccountMeta(pubkey=params.nested_token_mint_address, is_signer=False, is_writable=False),
            AccountMeta(pubkey=destination_associated_account_address, is_signer=False, is_writable=True),
            AccountMeta(pubkey=owner_associated_account_address, is_signer=False, is_writable=False),
            AccountMeta(pubkey=params.owner_token_mint_address, is_signer=False, is_writable=False),
            AccountMeta(pubkey=params.wallet_address, is_signer=True, is_writable=True),
            AccountMeta(pubkey=params.token_program_id, is_signer=False, is_writable=False),
        ],
        program_id=ASSOCIATED_TOKEN_PROGRAM_ID,
        data=encode(INSTRUCTIONS_LAYOUT, dict(instruction_type=InstructionType.RECOVER_NESTED)),
    )
