"""SPL Token Constants."""

from spl.token.constants import TOKEN_2022_PROGRAM_ID, TOKEN_PROGRAM_ID  # noqa: F401

MINT_LEN: int = 82
"""Size of a mint account without extensions."""

ACCOUNT_LEN: int = 165
"""Size of a token account without extensions."""

MULTISIG_LEN: int = 355
"""Size of a multisig account."""

MAX_SIGNERS: int = 11
"""Maximum number of multisig signers."""
