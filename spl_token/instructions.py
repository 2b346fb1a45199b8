"""SPL Token Instructions.

These builders take the token program id explicitly so that they produce
instructions for both the original token program and token-2022, which
shares the same base instruction set.
"""

from enum import IntEnum
from typing import List, NamedTuple, Optional

from construct import Int8ul, Int64ul, Pass, Struct, Switch  # type: ignore

from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey
from solders.sysvar import RENT

from codec.encoding import encode
from codec.layouts import OPTIONAL_PUBLIC_KEY_LAYOUT, PUBLIC_KEY_LAYOUT
from spl_token.constants import MAX_SIGNERS


class InitializeMintParams(NamedTuple):
    """Initialize token mint transaction params."""

    program_id: Pubkey
    """SPL Token program account."""
    mint: Pubkey
    """[w] The mint to initialize."""
    decimals: int
    """Number of base 10 digits to the right of the decimal place."""
    mint_authority: Pubkey
    """The authority/multisignature to mint tokens."""
    freeze_authority: Optional[Pubkey] = None
    """The freeze authority/multisignature of the mint."""


class MintToParams(NamedTuple):
    """Mint new tokens to an account."""

    program_id: Pubkey
    """SPL Token program account."""
    mint: Pubkey
    """[w] The mint."""
    dest: Pubkey
    """[w] The account to mint tokens to."""
    mint_authority: Pubkey
    """[s]/[] The mint's minting authority, or its multisignature account."""
    amount: int
    """Amount of new tokens to mint."""
    signers: Optional[List[Pubkey]] = None
    """[s] Signer accounts if `mint_authority` is a multisig."""


class CloseAccountParams(NamedTuple):
    """Close a token account, transferring its lamports to the destination."""

    program_id: Pubkey
    """SPL Token program account."""
    account: Pubkey
    """[w] The account to close."""
    dest: Pubkey
    """[w] The destination account."""
    owner: Pubkey
    """[s]/[] The account's owner, or its multisignature account."""
    signers: Optional[List[Pubkey]] = None
    """[s] Signer accounts if `owner` is a multisig."""


class FreezeAccountParams(NamedTuple):
    """Freeze or thaw a token account using the mint's freeze authority."""

    program_id: Pubkey
    """SPL Token program account."""
    account: Pubkey
    """[w] The account to freeze or thaw."""
    mint: Pubkey
    """[] The token mint."""
    authority: Pubkey
    """[s]/[] The mint freeze authority, or its multisignature account."""
    signers: Optional[List[Pubkey]] = None
    """[s] Signer accounts if `authority` is a multisig."""


class InstructionType(IntEnum):
    """Token Instruction Types, shared by token and token-2022."""

    INITIALIZE_MINT = 0
    INITIALIZE_ACCOUNT = 1
    INITIALIZE_MULTISIG = 2
    TRANSFER = 3
    APPROVE = 4
    REVOKE = 5
    SET_AUTHORITY = 6
    MINT_TO = 7
    BURN = 8
    CLOSE_ACCOUNT = 9
    FREEZE_ACCOUNT = 10
    THAW_ACCOUNT = 11
    TRANSFER_CHECKED = 12
    APPROVE_CHECKED = 13
    MINT_TO_CHECKED = 14
    BURN_CHECKED = 15
    INITIALIZE_ACCOUNT2 = 16
    SYNC_NATIVE = 17
    INITIALIZE_ACCOUNT3 = 18
    INITIALIZE_MULTISIG2 = 19
    INITIALIZE_MINT2 = 20
    GET_ACCOUNT_DATA_SIZE = 21
    INITIALIZE_IMMUTABLE_OWNER = 22
    AMOUNT_TO_UI_AMOUNT = 23
    UI_AMOUNT_TO_AMOUNT = 24
    INITIALIZE_MINT_CLOSE_AUTHORITY = 25
    TRANSFER_FEE_EXTENSION = 26
    CONFIDENTIAL_TRANSFER_EXTENSION = 27
    DEFAULT_ACCOUNT_STATE_EXTENSION = 28
    REALLOCATE = 29
    MEMO_TRANSFER_EXTENSION = 30
    CREATE_NATIVE_MINT = 31
    INITIALIZE_NON_TRANSFERABLE_MINT = 32
    INTEREST_BEARING_MINT_EXTENSION = 33
    CPI_GUARD_EXTENSION = 34
    INITIALIZE_PERMANENT_DELEGATE = 35
    TRANSFER_HOOK_EXTENSION = 36
    CONFIDENTIAL_TRANSFER_FEE_EXTENSION = 37
    WITHDRAW_EXCESS_LAMPORTS = 38
    METADATA_POINTER_EXTENSION = 39


INITIALIZE_MINT_LAYOUT = Struct(
    "decimals" / Int8ul,
    "mint_authority" / PUBLIC_KEY_LAYOUT,
    "freeze_authority" / OPTIONAL_PUBLIC_KEY_LAYOUT,
)

AMOUNT_LAYOUT = Struct(
    "amount" / Int64ul
)

INSTRUCTIONS_LAYOUT = Struct(
    "instruction_type" / Int8ul,
    "args"
    / Switch(
        lambda this: this.instruction_type,
        {
            InstructionType.INITIALIZE_MINT: INITIALIZE_MINT_LAYOUT,
            InstructionType.MINT_TO: AMOUNT_LAYOUT,
            InstructionType.CLOSE_ACCOUNT: Pass,
            InstructionType.FREEZE_ACCOUNT: Pass,
            InstructionType.THAW_ACCOUNT: Pass,
            InstructionType.INITIALIZE_MINT2: INITIALIZE_MINT_LAYOUT,
        },
    ),
)


def _add_signers(keys: List[AccountMeta], owner: Pubkey, signers: Optional[List[Pubkey]]) -> List[AccountMeta]:
    """Appends the owner, signing only when it is not a multisig, followed by the multisig signers."""
    signers = signers or []
    if len(signers) > MAX_SIGNERS:
        raise ValueError(f"At most {MAX_SIGNERS} multisig signers are allowed, got {len(signers)}")
    keys.append(AccountMeta(pubkey=owner, is_signer=not signers, is_writable=False))
    keys.extend([
        AccountMeta(pubkey=signer, is_signer=True, is_writable=False)
        for signer in signers
    ])
    return keys


def _initialize_mint_args(params: InitializeMintParams):
    return dict(
        decimals=params.decimals,
        mint_authority=params.mint_authority,
        freeze_authority=params.freeze_authority,
    )


def initialize_mint(params: InitializeMintParams) -> Instruction:
    """Creates a transaction instruction to initialize a new mint, passing the rent sysvar."""
    return Instruction(
        accounts=[
            AccountMeta(pubkey=params.mint, is_signer=False, is_writable=True),
            AccountMeta(pubkey=RENT, is_signer=False, is_writable=False),
        ],
        program_id=params.program_id,
        data=encode(
            INSTRUCTIONS_LAYOUT,
            dict(
                instruction_type=InstructionType.INITIALIZE_MINT,
                args=_initialize_mint_args(params),
            )
        )
    )


def initialize_mint2(params: InitializeMintParams) -> Instruction:
    """Creates a transaction instruction to initialize a new mint without the rent sysvar."""
    return Instruction(
        accounts=[
            AccountMeta(pubkey=params.mint, is_signer=False, is_writable=True),
        ],
        program_id=params.program_id,
        data=encode(
            INSTRUCTIONS_LAYOUT,
            dict(
                instruction_type=InstructionType.INITIALIZE_MINT2,
                args=_initialize_mint_args(params),
            )
        )
    )


def mint_to(params: MintToParams) -> Instruction:
    """Creates a transaction instruction to mint new tokens to an account."""
    keys = [
        AccountMeta(pubkey=params.mint, is_signer=False, is_writable=True),
        AccountMeta(pubkey=params.dest, is_signer=False, is_writable=True),
    ]
    return Instruction(
        accounts=_add_signers(keys, params.mint_authority, params.signers),
        program_id=params.program_id,
        data=encode(
            INSTRUCTIONS_LAYOUT,
            dict(
                instruction_type=InstructionType.MINT_TO,
                args={'amount': params.amount},
            )
        )
    )


def close_account(params: CloseAccountParams) -> Instruction:
    """Creates a transaction instruction to close an account by transferring all its lamports to the destination.

    Non-native accounts may only be closed if their token amount is zero.
    """
    keys = [
        AccountMeta(pubkey=params.account, is_signer=False, is_writable=True),
        AccountMeta(pubkey=params.dest, is_signer=False, is_writable=True),
    ]
    return Instruction(
        accounts=_add_signers(keys, params.owner, params.signers),
        program_id=params.program_id,
        data=encode(
            INSTRUCTIONS_LAYOUT,
            dict(
                instruction_type=InstructionType.CLOSE_ACCOUNT,
                args=None,
            )
        )
    )


def _freeze_or_thaw(params: FreezeAccountParams, instruction_type: InstructionType) -> Instruction:
    keys = [
        AccountMeta(pubkey=params.account, is_signer=False, is_writable=True),
        AccountMeta(pubkey=params.mint, is_signer=False, is_writable=False),
    ]
    return Instruction(
        accounts=_add_signers(keys, params.authority, params.signers),
        program_id=params.program_id,
        data=encode(
            INSTRUCTIONS_LAYOUT,
            dict(
                instruction_type=instruction_type,
                args=None,
            )
        )
    )


def freeze_account(params: FreezeAccountParams) -> Instruction:
    """Creates a transaction instruction to freeze an initialized account using the mint's freeze authority."""
    return _freeze_or_thaw(params, InstructionType.FREEZE_ACCOUNT)


def thaw_account(params: FreezeAccountParams) -> Instruction:
    """Creates a transaction instruction to thaw a frozen account using the mint's freeze authority."""
    return _freeze_or_thaw(params, InstructionType.THAW_ACCOUNT)
