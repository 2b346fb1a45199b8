"""Ordered account schemas.

An instruction variant declares its accounts as a sequence of roles. Position
is significant to the receiving program, so an optional account that was not
supplied still occupies its slot: either with the role's default key (system
program, instructions sysvar) or with an inert placeholder, conventionally the
receiving program's own id.
"""

from typing import List, Mapping, NamedTuple, Optional, Sequence, Tuple, Union

from solders.instruction import AccountMeta
from solders.pubkey import Pubkey

from accounts.errors import MissingRequiredAccountError

SuppliedAccount = Union[Pubkey, Tuple[Pubkey, bool]]
"""A key, or a key paired with a signer flag overriding the role's default."""


class AccountRole(NamedTuple):
    """One positional account slot of an instruction."""

    name: str
    """Role name, used to look up the supplied key."""
    is_writable: bool = False
    """Whether the slot is writable when filled with a supplied or default key."""
    is_signer: bool = False
    """Whether the slot signs when filled with a supplied or default key."""
    optional: bool = False
    """Whether the slot may be left unset."""
    default: Optional[Pubkey] = None
    """Well-known key used when the slot is unset, keeping the role's flags."""


def build_account_metas(
    schema: Sequence[AccountRole],
    supplied: Mapping[str, Optional[SuppliedAccount]],
    placeholder: Pubkey,
) -> List[AccountMeta]:
    """Emits one `AccountMeta` per role, in schema order.

    Unset optional roles without a default are filled with `placeholder`,
    read-only and non-signer.
    """
    accounts = []
    for role in schema:
        value = supplied.get(role.name)
        if value is None:
            if role.default is not None:
                accounts.append(
                    AccountMeta(pubkey=role.default, is_signer=role.is_signer, is_writable=role.is_writable))
            elif role.optional:
                accounts.append(AccountMeta(pubkey=placeholder, is_signer=False, is_writable=False))
            else:
                raise MissingRequiredAccountError(role.name)
            continue
        if isinstance(value, tuple):
            (pubkey, is_signer) = value
        else:
            (pubkey, is_signer) = (value, role.is_signer)
        accounts.append(AccountMeta(pubkey=pubkey, is_signer=is_signer, is_writable=role.is_writable))
    return accounts
