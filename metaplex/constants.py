"""Token Metadata Program Constants."""

from typing import Tuple

from solders.pubkey import Pubkey
from solders.sysvar import INSTRUCTIONS  # noqa: F401

METADATA_PROGRAM_ID = Pubkey.from_string("metaqbxxUerdq28cj1RbAWkYQm3ybzjb6a8bt518x1s")
"""Public key that identifies the Metaplex Token Metadata program."""

METADATA_PREFIX = b"metadata"
"""Seed prefix shared by every metadata program address."""

EDITION_SEED = b"edition"
"""Seed suffix of edition accounts."""

TOKEN_RECORD_SEED = b"token_record"
"""Seed of token record accounts."""

MAX_NAME_LENGTH: int = 32
MAX_SYMBOL_LENGTH: int = 10
MAX_URI_LENGTH: int = 200
MAX_CREATOR_LIMIT: int = 5


def find_metadata_account(mint: Pubkey) -> Tuple[Pubkey, int]:
    """Generates the metadata account address for a mint"""
    return Pubkey.find_program_address(
        [METADATA_PREFIX, bytes(METADATA_PROGRAM_ID), bytes(mint)],
        METADATA_PROGRAM_ID,
    )


def find_master_edition_account(mint: Pubkey) -> Tuple[Pubkey, int]:
    """Generates the master edition account address for a mint"""
    return Pubkey.find_program_address(
        [METADATA_PREFIX, bytes(METADATA_PROGRAM_ID), bytes(mint), EDITION_SEED],
        METADATA_PROGRAM_ID,
    )


def find_token_record_account(mint: Pubkey, token: Pubkey) -> Tuple[Pubkey, int]:
    """Generates the token record account address for a token account of a programmable mint"""
    return Pubkey.find_program_address(
        [METADATA_PREFIX, bytes(METADATA_PROGRAM_ID), bytes(mint), TOKEN_RECORD_SEED, bytes(token)],
        METADATA_PROGRAM_ID,
    )
