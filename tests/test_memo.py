from spl.memo.constants import MEMO_PROGRAM_ID

from solders.instruction import AccountMeta

from memo.instructions import memo


def test_memo(payer):
    ix = memo("hello", [payer])
    assert ix.program_id == MEMO_PROGRAM_ID
    assert ix.data == b"hello"
    assert ix.accounts == [AccountMeta(pubkey=payer, is_signer=True, is_writable=False)]


def test_memo_without_signers():
    assert memo("").accounts == []
