from spl.token.instructions import get_associated_token_address as spl_get_associated_token_address

from solders.instruction import AccountMeta
from solders.pubkey import Pubkey

from associated_token.constants import (
    ASSOCIATED_TOKEN_PROGRAM_ID,
    find_associated_token_address,
    get_associated_token_address,
)
from associated_token.instructions import (
    RecoverNestedParams,
    create_associated_token_account,
    create_associated_token_account_idempotent,
    recover_nested,
)
from spl_token.constants import TOKEN_2022_PROGRAM_ID, TOKEN_PROGRAM_ID
from system.constants import SYSTEM_PROGRAM_ID


def test_address_matches_solana_py(wallet, mint):
    assert get_associated_token_address(wallet, mint) == spl_get_associated_token_address(wallet, mint)


def test_address_depends_on_token_program(wallet, mint):
    (address, bump) = find_associated_token_address(wallet, mint, TOKEN_2022_PROGRAM_ID)
    assert address == Pubkey.create_program_address(
        [bytes(wallet), bytes(TOKEN_2022_PROGRAM_ID), bytes(mint), bytes([bump])],
        ASSOCIATED_TOKEN_PROGRAM_ID,
    )
    assert address != get_associated_token_address(wallet, mint, TOKEN_PROGRAM_ID)


def test_create(payer, wallet, mint):
    ix = create_associated_token_account(payer, wallet, mint)
    assert ix.program_id == ASSOCIATED_TOKEN_PROGRAM_ID
    assert ix.data == b"\x00"
    assert ix.accounts == [
        AccountMeta(pubkey=payer, is_signer=True, is_writable=True),
        AccountMeta(pubkey=get_associated_token_address(wallet, mint), is_signer=False, is_writable=True),
        AccountMeta(pubkey=wallet, is_signer=False, is_writable=False),
        AccountMeta(pubkey=mint, is_signer=False, is_writable=False),
        AccountMeta(pubkey=SYSTEM_PROGRAM_ID, is_signer=False, is_writable=False),
        AccountMeta(pubkey=TOKEN_PROGRAM_ID, is_signer=False, is_writable=False),
    ]


def test_idempotent_differs_only_in_tag(payer, wallet, mint):
    create = create_associated_token_account(payer, wallet, mint, TOKEN_2022_PROGRAM_ID)
    idempotent = create_associated_token_account_idempotent(payer, wallet, mint, TOKEN_2022_PROGRAM_ID)
    assert create.data == b"\x00"
    assert idempotent.data == b"\x01"
    assert create.accounts == idempotent.accounts
    assert create.program_id == idempotent.program_id


def test_recover_nested(wallet):
    owner_mint = Pubkey.new_unique()
    nested_mint = Pubkey.new_unique()
    ix = recover_nested(RecoverNestedParams(
        wallet_address=wallet, owner_token_mint_address=owner_mint, nested_token_mint_address=nested_mint))
    owner_account = get_associated_token_address(wallet, owner_mint)
    assert ix.data == b"\x02"
    assert ix.accounts == [
        AccountMeta(
            pubkey=get_associated_token_address(owner_account, nested_mint), is_signer=False, is_writable=True),
        AccountMeta(pubkey=nested_mint, is_signer=False, is_writable=False),
        AccountMeta(pubkey=get_associated_token_address(wallet, nested_mint), is_signer=False, is_writable=True),
        AccountMeta(pubkey=owner_account, is_signer=False, is_writable=False),
        AccountMeta(pubkey=owner_mint, is_signer=False, is_writable=False),
        AccountMeta(pubkey=wallet, is_signer=True, is_writable=True),
        AccountMeta(pubkey=TOKEN_PROGRAM_ID, is_signer=False, is_writable=False),
    ]
