"""Token metadata interface state, stored as a variable-length TLV entry."""

from typing import NamedTuple, Optional, Sequence, Tuple

import borsh_construct as borsh  # type: ignore
from construct import Container  # type: ignore

from solders.pubkey import Pubkey

from codec.encoding import decode, encode, packed_len
from codec.layouts import BORSH_STRING, OPTIONAL_NON_ZERO_PUBLIC_KEY_LAYOUT, PUBLIC_KEY_LAYOUT

TLV_HEADER_LEN: int = 10
"""Bytes reserved ahead of the serialized metadata inside the mint account."""


class TokenMetadata(NamedTuple):
    """Metadata held directly by a token-2022 mint."""

    update_authority: Optional[Pubkey]
    """Authority allowed to update the metadata, `None` if immutable."""
    mint: Pubkey
    """Mint the metadata belongs to."""
    name: str
    """Longer name of the token."""
    symbol: str
    """Shortened symbol for the token."""
    uri: str
    """URI pointing to richer metadata."""
    additional_metadata: Sequence[Tuple[str, str]] = ()
    """Additional key/value pairs, keys are unique."""

    @classmethod
    def decode_container(cls, container: Container) -> 'TokenMetadata':
        return TokenMetadata(
            update_authority=container['update_authority'],
            mint=container['mint'],
            name=container['name'],
            symbol=container['symbol'],
            uri=container['uri'],
            additional_metadata=tuple((key, value) for (key, value) in container['additional_metadata']),
        )

    def as_container(self) -> dict:
        return dict(
            update_authority=self.update_authority,
            mint=self.mint,
            name=self.name,
            symbol=self.symbol,
            uri=self.uri,
            additional_metadata=[(key, value) for (key, value) in self.additional_metadata],
        )

    @classmethod
    def decode(cls, data: bytes) -> 'TokenMetadata':
        return TokenMetadata.decode_container(decode(TOKEN_METADATA_LAYOUT, data))

    def encode(self) -> bytes:
        return encode(TOKEN_METADATA_LAYOUT, self.as_container())

    def tlv_size_of(self) -> int:
        """Total size of this metadata as a TLV entry in an account."""
        return TLV_HEADER_LEN + packed_len(TOKEN_METADATA_LAYOUT, self.as_container())


TOKEN_METADATA_LAYOUT = borsh.CStruct(
    "update_authority" / OPTIONAL_NON_ZERO_PUBLIC_KEY_LAYOUT,
    "mint" / PUBLIC_KEY_LAYOUT,
    "name" / BORSH_STRING,
    "symbol" / BORSH_STRING,
    "uri" / BORSH_STRING,
    "additional_metadata" / borsh.Vec(borsh.TupleStruct(BORSH_STRING, BORSH_STRING)),
)
