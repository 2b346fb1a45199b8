"""System Program Constants."""

from solana.constants import SYSTEM_PROGRAM_ID  # noqa: F401
from solders.pubkey import Pubkey

MAX_SEED_LEN: int = 32
"""Maximum length in bytes of a seed used for derived account addresses."""

MAX_PERMITTED_DATA_LENGTH: int = 10 * 1024 * 1024
"""Maximum permitted size of account data."""

ACCOUNT_STORAGE_OVERHEAD: int = 128
"""Bytes of account metadata charged on top of the account data for rent."""

DEFAULT_LAMPORTS_PER_BYTE_YEAR: int = 3480
"""Default rent rate."""

DEFAULT_EXEMPTION_THRESHOLD: float = 2.0
"""Default number of years of rent an account must hold to be exempt."""


def minimum_balance_for_rent_exemption(data_len: int) -> int:
    """Lamports needed for an account of `data_len` bytes to be rent exempt under default rent."""
    return int(
        ((ACCOUNT_STORAGE_OVERHEAD + data_len) * DEFAULT_LAMPORTS_PER_BYTE_YEAR) * DEFAULT_EXEMPTION_THRESHOLD
    )


def create_with_seed(base: Pubkey, seed: str, owner: Pubkey) -> Pubkey:
    """Derives the address of an account created with `create_account_with_seed`"""
    if len(seed.encode("utf-8")) > MAX_SEED_LEN:
        raise ValueError(f"Seed {seed!r} is longer than {MAX_SEED_LEN} bytes")
    return Pubkey.create_with_seed(base, seed, owner)
