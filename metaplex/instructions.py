"""Token Metadata program instruction builders.

Builders accumulate accounts and arguments through chained setters and
assemble the instruction on `instruction()`. Every account slot is always
present: unset optional accounts are filled with the metadata program id,
read-only and non-signer.
"""

import logging
from enum import IntEnum
from typing import Dict, List, NamedTuple, Optional, Sequence

import borsh_construct as borsh  # type: ignore
from construct import Error, Int8ul, Struct, Switch  # type: ignore

from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey

from accounts.errors import MissingFieldError
from accounts.schema import AccountRole, SuppliedAccount, build_account_metas
from codec.encoding import encode
from codec.layouts import PUBLIC_KEY_LAYOUT
from codec.toggle import Toggle
from metaplex.constants import INSTRUCTIONS, METADATA_PROGRAM_ID
from metaplex.types import (
    AUTHORIZATION_DATA_LAYOUT,
    COLLECTION_DETAILS_TOGGLE_LAYOUT,
    COLLECTION_TOGGLE_LAYOUT,
    CREATE_ARGS_LAYOUT,
    DATA_LAYOUT,
    RULE_SET_TOGGLE_LAYOUT,
    USES_TOGGLE_LAYOUT,
    AuthorizationData,
    Collection,
    CollectionDetails,
    CreateArgs,
    Data,
    Uses,
)
from system.constants import SYSTEM_PROGRAM_ID

logger = logging.getLogger(__name__)


class InstructionType(IntEnum):
    """Token Metadata Instruction Types used by this package."""

    CREATE = 42
    UPDATE = 50


class UpdateType(IntEnum):
    """Version of the `Update` instruction."""

    V1 = 0


UPDATE_V1_ARGS_LAYOUT = borsh.CStruct(
    "new_update_authority" / borsh.Option(PUBLIC_KEY_LAYOUT),
    "data" / borsh.Option(DATA_LAYOUT),
    "primary_sale_happened" / borsh.Option(borsh.Bool),
    "is_mutable" / borsh.Option(borsh.Bool),
    "collection" / COLLECTION_TOGGLE_LAYOUT,
    "collection_details" / COLLECTION_DETAILS_TOGGLE_LAYOUT,
    "uses" / USES_TOGGLE_LAYOUT,
    "rule_set" / RULE_SET_TOGGLE_LAYOUT,
    "authorization_data" / borsh.Option(AUTHORIZATION_DATA_LAYOUT),
)

UPDATE_LAYOUT = Struct(
    "update_type" / Int8ul,
    "args"
    / Switch(
        lambda this: this.update_type,
        {
            UpdateType.V1: UPDATE_V1_ARGS_LAYOUT,
        },
        default=Error,
    ),
)

INSTRUCTIONS_LAYOUT = Struct(
    "instruction_type" / Int8ul,
    "args"
    / Switch(
        lambda this: this.instruction_type,
        {
            InstructionType.CREATE: CREATE_ARGS_LAYOUT,
            InstructionType.UPDATE: UPDATE_LAYOUT,
        },
        default=Error,
    ),
)

CREATE_ACCOUNTS = (
    AccountRole("metadata", is_writable=True),
    AccountRole("master_edition", is_writable=True, optional=True),
    AccountRole("mint", is_writable=True, is_signer=True),
    AccountRole("authority", is_signer=True),
    AccountRole("payer", is_writable=True, is_signer=True),
    AccountRole("update_authority", is_signer=True),
    AccountRole("system_program", optional=True, default=SYSTEM_PROGRAM_ID),
    AccountRole("sysvar_instructions", optional=True, default=INSTRUCTIONS),
    AccountRole("spl_token_program", optional=True),
)
"""Accounts of `Create`, in order."""

UPDATE_V1_ACCOUNTS = (
    AccountRole("authority", is_signer=True),
    AccountRole("delegate_record", optional=True),
    AccountRole("token", optional=True),
    AccountRole("mint"),
    AccountRole("metadata", is_writable=True),
    AccountRole("edition", optional=True),
    AccountRole("payer", is_writable=True, is_signer=True),
    AccountRole("system_program", optional=True, default=SYSTEM_PROGRAM_ID),
    AccountRole("sysvar_instructions", optional=True, default=INSTRUCTIONS),
    AccountRole("authorization_rules_program", optional=True),
    AccountRole("authorization_rules", optional=True),
)
"""Accounts of `UpdateV1`, in order."""


class UpdateV1Args(NamedTuple):
    """Arguments of `UpdateV1`. Unset fields leave the asset unchanged."""

    new_update_authority: Optional[Pubkey] = None
    data: Optional[Data] = None
    primary_sale_happened: Optional[bool] = None
    is_mutable: Optional[bool] = None
    collection: Toggle = Toggle.unchanged()
    """`Toggle` of `Collection`."""
    collection_details: Toggle = Toggle.unchanged()
    """`Toggle` of `CollectionDetails`."""
    uses: Toggle = Toggle.unchanged()
    """`Toggle` of `Uses`."""
    rule_set: Toggle = Toggle.unchanged()
    """`Toggle` of the rule set `Pubkey`."""
    authorization_data: Optional[AuthorizationData] = None

    def as_container(self) -> dict:
        return dict(
            new_update_authority=self.new_update_authority,
            data=self.data.as_container() if self.data is not None else None,
            primary_sale_happened=self.primary_sale_happened,
            is_mutable=self.is_mutable,
            collection=self.collection.as_container(Collection.as_container),
            collection_details=self.collection_details.as_container(CollectionDetails.as_container),
            uses=self.uses.as_container(Uses.as_container),
            rule_set=self.rule_set.as_container(),
            authorization_data=(
                self.authorization_data.as_container() if self.authorization_data is not None else None
            ),
        )


def _assemble(
    schema: Sequence[AccountRole],
    supplied: Dict[str, Optional[SuppliedAccount]],
    remaining_accounts: List[AccountMeta],
    data: bytes,
) -> Instruction:
    for role in schema:
        if supplied.get(role.name) is None:
            if not role.optional:
                raise MissingFieldError(role.name)
            if role.default is None:
                logger.debug("%s not set, using placeholder %s", role.name, METADATA_PROGRAM_ID)
    accounts = build_account_metas(schema, supplied, METADATA_PROGRAM_ID)
    return Instruction(
        accounts=accounts + remaining_accounts,
        program_id=METADATA_PROGRAM_ID,
        data=data,
    )


class CreateBuilder:
    """Builds a `Create` instruction, creating the metadata account of a mint.

    Accounts:
      0. [w] metadata, pda of ['metadata', program id, mint]
      1. [w, optional] master_edition, pda of ['metadata', program id, mint, 'edition']
      2. [w, s?] mint
      3. [s] authority, the mint authority
      4. [ws] payer
      5. [s?] update_authority
      6. [optional] system_program, defaults to the system program
      7. [optional] sysvar_instructions, defaults to the instructions sysvar
      8. [optional] spl_token_program
    """

    def __init__(self):
        self._accounts: Dict[str, Optional[SuppliedAccount]] = {}
        self._create_args: Optional[CreateArgs] = None
        self._remaining_accounts: List[AccountMeta] = []

    def metadata(self, metadata: Pubkey) -> 'CreateBuilder':
        self._accounts['metadata'] = metadata
        return self

    def master_edition(self, master_edition: Optional[Pubkey]) -> 'CreateBuilder':
        self._accounts['master_edition'] = master_edition
        return self

    def mint(self, mint: Pubkey, as_signer: bool) -> 'CreateBuilder':
        """Mint of the asset, signing when it is created in the same transaction."""
        self._accounts['mint'] = (mint, as_signer)
        return self

    def authority(self, authority: Pubkey) -> 'CreateBuilder':
        self._accounts['authority'] = authority
        return self

    def payer(self, payer: Pubkey) -> 'CreateBuilder':
        self._accounts['payer'] = payer
        return self

    def update_authority(self, update_authority: Pubkey, as_signer: bool) -> 'CreateBuilder':
        self._accounts['update_authority'] = (update_authority, as_signer)
        return self

    def system_program(self, system_program: Pubkey) -> 'CreateBuilder':
        self._accounts['system_program'] = system_program
        return self

    def sysvar_instructions(self, sysvar_instructions: Pubkey) -> 'CreateBuilder':
        self._accounts['sysvar_instructions'] = sysvar_instructions
        return self

    def spl_token_program(self, spl_token_program: Optional[Pubkey]) -> 'CreateBuilder':
        self._accounts['spl_token_program'] = spl_token_program
        return self

    def create_args(self, create_args: CreateArgs) -> 'CreateBuilder':
        self._create_args = create_args
        return self

    def add_remaining_account(self, account: AccountMeta) -> 'CreateBuilder':
        self._remaining_accounts.append(account)
        return self

    def add_remaining_accounts(self, accounts: Sequence[AccountMeta]) -> 'CreateBuilder':
        self._remaining_accounts.extend(accounts)
        return self

    def instruction(self) -> Instruction:
        """Assembles the instruction, raising `MissingFieldError` if a required field was never set."""
        if self._create_args is None:
            raise MissingFieldError("create_args")
        data = encode(
            INSTRUCTIONS_LAYOUT,
            dict(
                instruction_type=InstructionType.CREATE,
                args=self._create_args.as_container(),
            )
        )
        return _assemble(CREATE_ACCOUNTS, self._accounts, self._remaining_accounts, data)


class UpdateV1Builder:
    """Builds an `UpdateV1` instruction, updating the metadata of an asset.

    Accounts:
      0. [s] authority, update authority or delegate
      1. [optional] delegate_record
      2. [optional] token
      3. [] mint
      4. [w] metadata
      5. [optional] edition
      6. [ws] payer
      7. [optional] system_program, defaults to the system program
      8. [optional] sysvar_instructions, defaults to the instructions sysvar
      9. [optional] authorization_rules_program
      10. [optional] authorization_rules
    """

    def __init__(self):
        self._accounts: Dict[str, Optional[SuppliedAccount]] = {}
        self._args = UpdateV1Args()
        self._remaining_accounts: List[AccountMeta] = []

    def authority(self, authority: Pubkey) -> 'UpdateV1Builder':
        self._accounts['authority'] = authority
        return self

    def delegate_record(self, delegate_record: Optional[Pubkey]) -> 'UpdateV1Builder':
        self._accounts['delegate_record'] = delegate_record
        return self

    def token(self, token: Optional[Pubkey]) -> 'UpdateV1Builder':
        self._accounts['token'] = token
        return self

    def mint(self, mint: Pubkey) -> 'UpdateV1Builder':
        self._accounts['mint'] = mint
        return self

    def metadata(self, metadata: Pubkey) -> 'UpdateV1Builder':
        self._accounts['metadata'] = metadata
        return self

    def edition(self, edition: Optional[Pubkey]) -> 'UpdateV1Builder':
        self._accounts['edition'] = edition
        return self

    def payer(self, payer: Pubkey) -> 'UpdateV1Builder':
        self._accounts['payer'] = payer
        return self

    def system_program(self, system_program: Pubkey) -> 'UpdateV1Builder':
        self._accounts['system_program'] = system_program
        return self

    def sysvar_instructions(self, sysvar_instructions: Pubkey) -> 'UpdateV1Builder':
        self._accounts['sysvar_instructions'] = sysvar_instructions
        return self

    def authorization_rules_program(self, authorization_rules_program: Optional[Pubkey]) -> 'UpdateV1Builder':
        self._accounts['authorization_rules_program'] = authorization_rules_program
        return self

    def authorization_rules(self, authorization_rules: Optional[Pubkey]) -> 'UpdateV1Builder':
        self._accounts['authorization_rules'] = authorization_rules
        return self

    def new_update_authority(self, new_update_authority: Pubkey) -> 'UpdateV1Builder':
        self._args = self._args._replace(new_update_authority=new_update_authority)
        return self

    def data(self, data: Data) -> 'UpdateV1Builder':
        self._args = self._args._replace(data=data)
        return self

    def primary_sale_happened(self, primary_sale_happened: bool) -> 'UpdateV1Builder':
        self._args = self._args._replace(primary_sale_happened=primary_sale_happened)
        return self

    def is_mutable(self, is_mutable: bool) -> 'UpdateV1Builder':
        self._args = self._args._replace(is_mutable=is_mutable)
        return self

    def collection(self, collection: Toggle) -> 'UpdateV1Builder':
        self._args = self._args._replace(collection=collection)
        return self

    def collection_details(self, collection_details: Toggle) -> 'UpdateV1Builder':
        self._args = self._args._replace(collection_details=collection_details)
        return self

    def uses(self, uses: Toggle) -> 'UpdateV1Builder':
        self._args = self._args._replace(uses=uses)
        return self

    def rule_set(self, rule_set: Toggle) -> 'UpdateV1Builder':
        self._args = self._args._replace(rule_set=rule_set)
        return self

    def authorization_data(self, authorization_data: AuthorizationData) -> 'UpdateV1Builder':
        self._args = self._args._replace(authorization_data=authorization_data)
        return self

    def update_args(self, update_args: UpdateV1Args) -> 'UpdateV1Builder':
        """Replaces every argument at once."""
        self._args = update_args
        return self

    def add_remaining_account(self, account: AccountMeta) -> 'UpdateV1Builder':
        self._remaining_accounts.append(account)
        return self

    def add_remaining_accounts(self, accounts: Sequence[AccountMeta]) -> 'UpdateV1Builder':
        self._remaining_accounts.extend(accounts)
        return self

    def instruction(self) -> Instruction:
        """Assembles the instruction, raising `MissingFieldError` if a required account was never set.

        The four toggles are always encoded, as "unchanged" when not set.
        """
        data = encode(
            INSTRUCTIONS_LAYOUT,
            dict(
                instruction_type=InstructionType.UPDATE,
                args=dict(update_type=UpdateType.V1, args=self._args.as_container()),
            )
        )
        return _assemble(UPDATE_V1_ACCOUNTS, self._accounts, self._remaining_accounts, data)
