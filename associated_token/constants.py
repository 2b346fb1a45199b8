"""Associated Token Account Constants."""

from typing import Tuple

from solders.pubkey import Pubkey
from spl.token.constants import ASSOCIATED_TOKEN_PROGRAM_ID, TOKEN_PROGRAM_ID  # noqa: F401


def find_associated_token_address(
    wallet_address: Pubkey,
    token_mint_address: Pubkey,
    token_program_id: Pubkey = TOKEN_PROGRAM_ID,
) -> Tuple[Pubkey, int]:
    """Generates the associated token account address and bump for a wallet, mint and token program"""
    return Pubkey.find_program_address(
        [bytes(wallet_address), bytes(token_program_id), bytes(token_mint_address)],
        ASSOCIATED_TOKEN_PROGRAM_ID,
    )


def get_associated_token_address(
    wallet_address: Pubkey,
    token_mint_address: Pubkey,
    token_program_id: Pubkey = TOKEN_PROGRAM_ID,
) -> Pubkey:
    """Derives the associated token account address for a wallet, mint and token program"""
    (address, _) = find_associated_token_address(wallet_address, token_mint_address, token_program_id)
    return address
