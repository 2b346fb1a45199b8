"""SPL Memo Instructions."""

from typing import List, Optional

from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey
from spl.memo.constants import MEMO_PROGRAM_ID


def memo(message: str, signers: Optional[List[Pubkey]] = None) -> Instruction:
    """Creates a transaction instruction recording a UTF-8 memo, verified against the given signers."""
    return Instruction(
        accounts=[
            AccountMeta(pubkey=signer, is_signer=True, is_writable=False)
            for signer in signers or []
        ],
        program_id=MEMO_PROGRAM_ID,
        data=message.encode("utf-8"),
    )
