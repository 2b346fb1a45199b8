"""Addresses of a token metadata asset."""

from typing import NamedTuple, Optional

from solders.pubkey import Pubkey

from metaplex.constants import find_master_edition_account, find_metadata_account, find_token_record_account


class Asset(NamedTuple):
    """Mint of an asset with its derived metadata accounts."""

    mint: Pubkey
    metadata: Pubkey
    edition: Optional[Pubkey] = None

    @classmethod
    def new(cls, mint: Pubkey) -> 'Asset':
        (metadata, _) = find_metadata_account(mint)
        return Asset(mint=mint, metadata=metadata)

    def with_edition(self) -> 'Asset':
        """The same asset with its master edition account."""
        (edition, _) = find_master_edition_account(self.mint)
        return self._replace(edition=edition)

    def get_token_record(self, token: Pubkey) -> Pubkey:
        (token_record, _) = find_token_record_account(self.mint, token)
        return token_record
