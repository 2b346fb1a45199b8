"""Shared binary layouts.

Two wire conventions are used by the programs in this repository: borsh
(u32 length prefixes, one-byte option and enum tags) for the metadata,
token-metadata and associated token programs, and bincode (u32 enum tags,
u64 length prefixes) for the system program. The token programs pack their
instructions by hand with single-byte tags, which the layouts below also
cover.
"""

from construct import Adapter, Bytes, GreedyString, Int64ul, Prefixed  # type: ignore
import borsh_construct as borsh  # type: ignore

from solders.pubkey import Pubkey

PUBLIC_KEY_LEN: int = 32
"""Length of a serialized public key."""


class PublicKeyAdapter(Adapter):
    """Maps a fixed 32-byte field to a `Pubkey`, with no length prefix."""

    def _decode(self, obj, context, path) -> Pubkey:
        return Pubkey(obj)

    def _encode(self, obj, context, path) -> bytes:
        return bytes(obj)


class OptionalNonZeroPubkeyAdapter(Adapter):
    """32-byte field where all zeroes means "no key"."""

    def _decode(self, obj, context, path):
        if obj == bytes(PUBLIC_KEY_LEN):
            return None
        return Pubkey(obj)

    def _encode(self, obj, context, path) -> bytes:
        if obj is None:
            return bytes(PUBLIC_KEY_LEN)
        return bytes(obj)


PUBLIC_KEY_LAYOUT = PublicKeyAdapter(Bytes(PUBLIC_KEY_LEN))

OPTIONAL_PUBLIC_KEY_LAYOUT = borsh.Option(PUBLIC_KEY_LAYOUT)
"""One-byte presence flag followed by the key when present (token `COption` packing)."""

OPTIONAL_NON_ZERO_PUBLIC_KEY_LAYOUT = OptionalNonZeroPubkeyAdapter(Bytes(PUBLIC_KEY_LEN))

BORSH_STRING = borsh.String
"""UTF-8 string with a u32 little-endian length prefix."""

BINCODE_STRING = Prefixed(Int64ul, GreedyString("utf8"))
"""UTF-8 string with a u64 little-endian length prefix."""
