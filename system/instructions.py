"""System Program Instructions."""

from enum import IntEnum
from typing import List, NamedTuple, Tuple

from construct import Container, Int32ul, Int64ul, Pass, Struct, Switch  # type: ignore

from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey

from codec.encoding import decode, encode
from codec.errors import CodecError
from codec.layouts import BINCODE_STRING, PUBLIC_KEY_LAYOUT
from system.constants import MAX_SEED_LEN, SYSTEM_PROGRAM_ID


class CreateAccountParams(NamedTuple):
    """Create a new account."""

    from_pubkey: Pubkey
    """[ws] Funding account."""
    to_pubkey: Pubkey
    """[ws] New account."""
    lamports: int
    """Number of lamports to transfer to the new account."""
    space: int
    """Number of bytes of memory to allocate."""
    owner: Pubkey
    """Address of program that will own the new account."""


class CreateAccountWithSeedParams(NamedTuple):
    """Create a new account at an address derived from a base pubkey and a seed."""

    from_pubkey: Pubkey
    """[ws] Funding account."""
    to_pubkey: Pubkey
    """[w] Created account, must match `Pubkey.create_with_seed(base, seed, owner)`."""
    base: Pubkey
    """[s] Base account."""
    seed: str
    """Seed used to derive the new account address."""
    lamports: int
    """Number of lamports to transfer to the new account."""
    space: int
    """Number of bytes of memory to allocate."""
    owner: Pubkey
    """Owner program account address."""


class AssignWithSeedParams(NamedTuple):
    """Assign account to a program based on a seed."""

    address: Pubkey
    """[w] Assigned account, derived from base and seed."""
    base: Pubkey
    """[s] Base account."""
    seed: str
    """Seed used to derive the account address."""
    owner: Pubkey
    """Owner program account."""


class TransferWithSeedParams(NamedTuple):
    """Transfer lamports from a derived address."""

    from_pubkey: Pubkey
    """[w] Funding account, derived from `from_base`, `from_seed` and `from_owner`."""
    from_base: Pubkey
    """[s] Base for the funding account."""
    from_seed: str
    """Seed used to derive the funding account address."""
    from_owner: Pubkey
    """Owner program used to derive the funding account address."""
    to_pubkey: Pubkey
    """[w] Recipient account."""
    lamports: int
    """Amount to transfer."""


class AllocateWithSeedParams(NamedTuple):
    """Allocate space for and assign an account at an address derived from a base pubkey and a seed."""

    address: Pubkey
    """[w] Allocated account, derived from base and seed."""
    base: Pubkey
    """[s] Base account."""
    seed: str
    """Seed used to derive the account address."""
    space: int
    """Number of bytes of memory to allocate."""
    owner: Pubkey
    """Owner program account."""


class InstructionType(IntEnum):
    """System Instruction Types."""

    CREATE_ACCOUNT = 0
    ASSIGN = 1
    TRANSFER = 2
    CREATE_ACCOUNT_WITH_SEED = 3
    ADVANCE_NONCE_ACCOUNT = 4
    WITHDRAW_NONCE_ACCOUNT = 5
    INITIALIZE_NONCE_ACCOUNT = 6
    AUTHORIZE_NONCE_ACCOUNT = 7
    ALLOCATE = 8
    ALLOCATE_WITH_SEED = 9
    ASSIGN_WITH_SEED = 10
    TRANSFER_WITH_SEED = 11
    UPGRADE_NONCE_ACCOUNT = 12


CREATE_ACCOUNT_LAYOUT = Struct(
    "lamports" / Int64ul,
    "space" / Int64ul,
    "owner" / PUBLIC_KEY_LAYOUT,
)

ASSIGN_LAYOUT = Struct(
    "owner" / PUBLIC_KEY_LAYOUT,
)

TRANSFER_LAYOUT = Struct(
    "lamports" / Int64ul,
)

CREATE_ACCOUNT_WITH_SEED_LAYOUT = Struct(
    "base" / PUBLIC_KEY_LAYOUT,
    "seed" / BINCODE_STRING,
    "lamports" / Int64ul,
    "space" / Int64ul,
    "owner" / PUBLIC_KEY_LAYOUT,
)

ALLOCATE_LAYOUT = Struct(
    "space" / Int64ul,
)

ALLOCATE_WITH_SEED_LAYOUT = Struct(
    "base" / PUBLIC_KEY_LAYOUT,
    "seed" / BINCODE_STRING,
    "space" / Int64ul,
    "owner" / PUBLIC_KEY_LAYOUT,
)

ASSIGN_WITH_SEED_LAYOUT = Struct(
    "base" / PUBLIC_KEY_LAYOUT,
    "seed" / BINCODE_STRING,
    "owner" / PUBLIC_KEY_LAYOUT,
)

TRANSFER_WITH_SEED_LAYOUT = Struct(
    "lamports" / Int64ul,
    "from_seed" / BINCODE_STRING,
    "from_owner" / PUBLIC_KEY_LAYOUT,
)

INSTRUCTIONS_LAYOUT = Struct(
    "instruction_type" / Int32ul,
    "args"
    / Switch(
        lambda this: this.instruction_type,
        {
            InstructionType.CREATE_ACCOUNT: CREATE_ACCOUNT_LAYOUT,
            InstructionType.ASSIGN: ASSIGN_LAYOUT,
            InstructionType.TRANSFER: TRANSFER_LAYOUT,
            InstructionType.CREATE_ACCOUNT_WITH_SEED: CREATE_ACCOUNT_WITH_SEED_LAYOUT,
            InstructionType.ADVANCE_NONCE_ACCOUNT: Pass,
            InstructionType.WITHDRAW_NONCE_ACCOUNT: Int64ul,
            InstructionType.INITIALIZE_NONCE_ACCOUNT: PUBLIC_KEY_LAYOUT,
            InstructionType.AUTHORIZE_NONCE_ACCOUNT: PUBLIC_KEY_LAYOUT,
            InstructionType.ALLOCATE: ALLOCATE_LAYOUT,
            InstructionType.ALLOCATE_WITH_SEED: ALLOCATE_WITH_SEED_LAYOUT,
            InstructionType.ASSIGN_WITH_SEED: ASSIGN_WITH_SEED_LAYOUT,
            InstructionType.TRANSFER_WITH_SEED: TRANSFER_WITH_SEED_LAYOUT,
            InstructionType.UPGRADE_NONCE_ACCOUNT: Pass,
        },
    ),
)


def _check_seed(seed: str) -> None:
    if len(seed.encode("utf-8")) > MAX_SEED_LEN:
        raise ValueError(f"Seed {seed!r} is longer than {MAX_SEED_LEN} bytes")


def _build(instruction_type: InstructionType, accounts: List[AccountMeta], args) -> Instruction:
    return Instruction(
        program_id=SYSTEM_PROGRAM_ID,
        accounts=accounts,
        data=encode(
            INSTRUCTIONS_LAYOUT,
            dict(
                instruction_type=instruction_type,
                args=args,
            )
        )
    )


def create_account(params: CreateAccountParams) -> Instruction:
    """Creates a transaction instruction to create a new account."""
    return _build(
        InstructionType.CREATE_ACCOUNT,
        [
            AccountMeta(pubkey=params.from_pubkey, is_signer=True, is_writable=True),
            AccountMeta(pubkey=params.to_pubkey, is_signer=True, is_writable=True),
        ],
        dict(lamports=params.lamports, space=params.space, owner=params.owner),
    )


def create_account_with_seed(params: CreateAccountWithSeedParams) -> Instruction:
    """Creates a transaction instruction to create a new account at a seed-derived address."""
    _check_seed(params.seed)
    return _build(
        InstructionType.CREATE_ACCOUNT_WITH_SEED,
        [
            AccountMeta(pubkey=params.from_pubkey, is_signer=True, is_writable=True),
            AccountMeta(pubkey=params.to_pubkey, is_signer=False, is_writable=True),
            AccountMeta(pubkey=params.base, is_signer=True, is_writable=False),
        ],
        dict(
            base=params.base,
            seed=params.seed,
            lamports=params.lamports,
            space=params.space,
            owner=params.owner,
        ),
    )


def assign(pubkey: Pubkey, owner: Pubkey) -> Instruction:
    """Creates a transaction instruction to assign an account to a program."""
    return _build(
        InstructionType.ASSIGN,
        [AccountMeta(pubkey=pubkey, is_signer=True, is_writable=True)],
        dict(owner=owner),
    )


def assign_with_seed(params: AssignWithSeedParams) -> Instruction:
    """Creates a transaction instruction to assign a seed-derived account to a program."""
    _check_seed(params.seed)
    return _build(
        InstructionType.ASSIGN_WITH_SEED,
        [
            AccountMeta(pubkey=params.address, is_signer=False, is_writable=True),
            AccountMeta(pubkey=params.base, is_signer=True, is_writable=False),
        ],
        dict(base=params.base, seed=params.seed, owner=params.owner),
    )


def transfer(from_pubkey: Pubkey, to_pubkey: Pubkey, lamports: int) -> Instruction:
    """Creates a transaction instruction to transfer lamports."""
    return _build(
        InstructionType.TRANSFER,
        [
            AccountMeta(pubkey=from_pubkey, is_signer=True, is_writable=True),
            AccountMeta(pubkey=to_pubkey, is_signer=False, is_writable=True),
        ],
        dict(lamports=lamports),
    )


def transfer_with_seed(params: TransferWithSeedParams) -> Instruction:
    """Creates a transaction instruction to transfer lamports out of a seed-derived account."""
    _check_seed(params.from_seed)
    return _build(
        InstructionType.TRANSFER_WITH_SEED,
        [
            AccountMeta(pubkey=params.from_pubkey, is_signer=False, is_writable=True),
            AccountMeta(pubkey=params.from_base, is_signer=True, is_writable=False),
            AccountMeta(pubkey=params.to_pubkey, is_signer=False, is_writable=True),
        ],
        dict(lamports=params.lamports, from_seed=params.from_seed, from_owner=params.from_owner),
    )


def allocate(pubkey: Pubkey, space: int) -> Instruction:
    """Creates a transaction instruction to allocate space in an account."""
    return _build(
        InstructionType.ALLOCATE,
        [AccountMeta(pubkey=pubkey, is_signer=True, is_writable=True)],
        dict(space=space),
    )


def allocate_with_seed(params: AllocateWithSeedParams) -> Instruction:
    """Creates a transaction instruction to allocate space in, and assign, a seed-derived account."""
    _check_seed(params.seed)
    return _build(
        InstructionType.ALLOCATE_WITH_SEED,
        [
            AccountMeta(pubkey=params.address, is_signer=False, is_writable=True),
            AccountMeta(pubkey=params.base, is_signer=True, is_writable=False),
        ],
        dict(base=params.base, seed=params.seed, space=params.space, owner=params.owner),
    )


def transfer_many(from_pubkey: Pubkey, to_lamports: List[Tuple[Pubkey, int]]) -> List[Instruction]:
    """Creates one transfer instruction per recipient.

    The system program has no batched transfer, so the result holds
    independent instructions in recipient order.
    """
    return [transfer(from_pubkey, to_pubkey, lamports) for (to_pubkey, lamports) in to_lamports]


def decode_instruction(data: bytes) -> Container:
    """Parses system instruction data into its type and arguments."""
    parsed = decode(INSTRUCTIONS_LAYOUT, data)
    try:
        parsed.instruction_type = InstructionType(parsed.instruction_type)
    except ValueError as e:
        raise CodecError(f"Unknown system instruction type {parsed.instruction_type}") from e
    return parsed
