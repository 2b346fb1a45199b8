"""Token metadata interface instructions.

Instructions are selected by an 8-byte discriminator, followed by the borsh
encoded arguments. Token-2022 implements the interface for metadata stored
in the mint itself.
"""

from enum import IntEnum
from typing import Union

from construct import Bytes, Error, Int8ul, Pass, Struct, Switch  # type: ignore

from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey

from codec.encoding import encode
from codec.layouts import BORSH_STRING
from spl_token.constants import TOKEN_2022_PROGRAM_ID

DISCRIMINATOR_LEN: int = 8

INITIALIZE_DISCRIMINATOR: bytes = bytes([210, 225, 30, 162, 88, 184, 77, 141])
"""`spl_token_metadata_interface:initialize_account`"""

UPDATE_FIELD_DISCRIMINATOR: bytes = bytes([221, 233, 49, 45, 181, 202, 220, 200])
"""`spl_token_metadata_interface:updating_field`"""


class Field(IntEnum):
    """Metadata field to update. A plain string names a custom key instead."""

    NAME = 0
    SYMBOL = 1
    URI = 2
    KEY = 3


INITIALIZE_LAYOUT = Struct(
    "name" / BORSH_STRING,
    "symbol" / BORSH_STRING,
    "uri" / BORSH_STRING,
)

FIELD_LAYOUT = Struct(
    "field_type" / Int8ul,
    "key"
    / Switch(
        lambda this: this.field_type,
        {
            Field.NAME: Pass,
            Field.SYMBOL: Pass,
            Field.URI: Pass,
            Field.KEY: BORSH_STRING,
        },
        default=Error,
    ),
)

UPDATE_FIELD_LAYOUT = Struct(
    "field" / FIELD_LAYOUT,
    "value" / BORSH_STRING,
)

INSTRUCTIONS_LAYOUT = Struct(
    "discriminator" / Bytes(DISCRIMINATOR_LEN),
    "args"
    / Switch(
        lambda this: bytes(this.discriminator),
        {
            INITIALIZE_DISCRIMINATOR: INITIALIZE_LAYOUT,
            UPDATE_FIELD_DISCRIMINATOR: UPDATE_FIELD_LAYOUT,
        },
        default=Error,
    ),
)


def _field_container(field: Union[Field, str]) -> dict:
    if isinstance(field, str):
        return dict(field_type=Field.KEY, key=field)
    if field == Field.KEY:
        raise ValueError("Pass the custom key itself to update a key field")
    return dict(field_type=field, key=None)


def initialize(
    metadata: Pubkey,
    update_authority: Pubkey,
    mint: Pubkey,
    mint_authority: Pubkey,
    name: str,
    symbol: str,
    uri: str,
    program_id: Pubkey = TOKEN_2022_PROGRAM_ID,
) -> Instruction:
    """Creates a transaction instruction to initialize the metadata of a mint.

    The mint authority signs. For metadata stored in a token-2022 mint,
    `metadata` is the mint itself.
    """
    return Instruction(
        accounts=[
            AccountMeta(pubkey=metadata, is_signer=False, is_writable=True),
            AccountMeta(pubkey=update_authority, is_signer=False, is_writable=False),
            AccountMeta(pubkey=mint, is_signer=False, is_writable=False),
            AccountMeta(pubkey=mint_authority, is_signer=True, is_writable=False),
        ],
        program_id=program_id,
        data=encode(
            INSTRUCTIONS_LAYOUT,
            dict(
                discriminator=INITIALIZE_DISCRIMINATOR,
                args=dict(name=name, symbol=symbol, uri=uri),
            )
        )
    )


def update_field(
    metadata: Pubkey,
    update_authority: Pubkey,
    field: Union[Field, str],
    value: str,
    program_id: Pubkey = TOKEN_2022_PROGRAM_ID,
) -> Instruction:
    """Creates a transaction instruction to set one metadata field.

    `field` is `Field.NAME`, `Field.SYMBOL`, `Field.URI`, or the custom key
    of an additional metadata entry, which is added if missing.
    """
    return Instruction(
        accounts=[
            AccountMeta(pubkey=metadata, is_signer=False, is_writable=True),
            AccountMeta(pubkey=update_authority, is_signer=True, is_writable=False),
        ],
        program_id=program_id,
        data=encode(
            INSTRUCTIONS_LAYOUT,
            dict(
                discriminator=UPDATE_FIELD_DISCRIMINATOR,
                args=dict(field=_field_container(field), value=value),
            )
        )
    )
