"""Token-2022 mint extensions: sizing and the descriptors used to request them."""

from enum import IntEnum
from typing import Any, Iterable, List, Mapping, NamedTuple, Optional, Sequence, Tuple

from solders.instruction import Instruction
from solders.pubkey import Pubkey

from spl_token.constants import MINT_LEN, MULTISIG_LEN
from token_2022.instructions import (
    InterestBearingMintParams,
    TransferFeeConfigParams,
    TransferHookParams,
    initialize_interest_bearing_mint,
    initialize_metadata_pointer,
    initialize_mint_close_authority,
    initialize_non_transferable_mint,
    initialize_permanent_delegate,
    initialize_transfer_fee_config,
    initialize_transfer_hook,
)

BASE_ACCOUNT_LEN: int = 165
"""Extended mints are padded to the token account length before the type marker."""

ACCOUNT_TYPE_LEN: int = 1
"""Single byte distinguishing mints from token accounts in extended layouts."""

TLV_TYPE_LEN: int = 2
TLV_LENGTH_LEN: int = 2


class ExtensionType(IntEnum):
    """Extension TLV type tags."""

    UNINITIALIZED = 0
    TRANSFER_FEE_CONFIG = 1
    TRANSFER_FEE_AMOUNT = 2
    MINT_CLOSE_AUTHORITY = 3
    CONFIDENTIAL_TRANSFER_MINT = 4
    CONFIDENTIAL_TRANSFER_ACCOUNT = 5
    DEFAULT_ACCOUNT_STATE = 6
    IMMUTABLE_OWNER = 7
    MEMO_TRANSFER = 8
    NON_TRANSFERABLE = 9
    INTEREST_BEARING_CONFIG = 10
    CPI_GUARD = 11
    PERMANENT_DELEGATE = 12
    NON_TRANSFERABLE_ACCOUNT = 13
    TRANSFER_HOOK = 14
    TRANSFER_HOOK_ACCOUNT = 15
    CONFIDENTIAL_TRANSFER_FEE_CONFIG = 16
    CONFIDENTIAL_TRANSFER_FEE_AMOUNT = 17
    METADATA_POINTER = 18
    TOKEN_METADATA = 19


EXTENSION_LENS = {
    ExtensionType.TRANSFER_FEE_CONFIG: 108,
    ExtensionType.MINT_CLOSE_AUTHORITY: 32,
    ExtensionType.NON_TRANSFERABLE: 0,
    ExtensionType.INTEREST_BEARING_CONFIG: 52,
    ExtensionType.PERMANENT_DELEGATE: 32,
    ExtensionType.TRANSFER_HOOK: 64,
    ExtensionType.METADATA_POINTER: 64,
}
"""Value length of the fixed-size mint extensions."""


def get_extension_len(extension_type: ExtensionType) -> int:
    """TLV footprint of a fixed-size mint extension, header included."""
    try:
        value_len = EXTENSION_LENS[extension_type]
    except KeyError:
        raise ValueError(f"{extension_type!r} is not a fixed-size mint extension") from None
    return TLV_TYPE_LEN + TLV_LENGTH_LEN + value_len


def get_mint_len(extension_types: Iterable[ExtensionType]) -> int:
    """Account length needed for a mint holding the given fixed-size extensions."""
    extension_types = list(dict.fromkeys(extension_types))
    if not extension_types:
        return MINT_LEN
    mint_len = BASE_ACCOUNT_LEN + ACCOUNT_TYPE_LEN + sum(
        get_extension_len(extension_type) for extension_type in extension_types
    )
    # a mint of exactly the multisig length would be ambiguous, pad it with an empty TLV header
    if mint_len == MULTISIG_LEN:
        mint_len += TLV_TYPE_LEN
    return mint_len


def _parse_pubkey(value: Optional[str]) -> Optional[Pubkey]:
    if value is None:
        return None
    return Pubkey.from_string(value)


class MetadataConfig(NamedTuple):
    """Metadata stored in the mint itself, pointed to by the metadata pointer extension."""

    extension_type = ExtensionType.METADATA_POINTER

    name: str
    symbol: str
    uri: str
    additional_metadata: Sequence[Tuple[str, str]] = ()
    """Extra key/value pairs, each written with its own update instruction."""

    def initialize_instruction(self, mint: Pubkey, payer: Pubkey) -> Instruction:
        return initialize_metadata_pointer(mint=mint, metadata_address=mint, authority=payer)

    @classmethod
    def from_dict(cls, value: Mapping[str, Any]) -> 'MetadataConfig':
        return MetadataConfig(
            name=value['name'],
            symbol=value['symbol'],
            uri=value['uri'],
            additional_metadata=tuple((key, val) for (key, val) in value.get('additional_metadata') or []),
        )


class CloseAuthorityConfig(NamedTuple):
    """Authority allowed to close the mint once its supply is zero."""

    extension_type = ExtensionType.MINT_CLOSE_AUTHORITY

    close_authority: Pubkey

    def initialize_instruction(self, mint: Pubkey, payer: Pubkey) -> Instruction:
        return initialize_mint_close_authority(mint=mint, close_authority=self.close_authority)


class PermanentDelegateConfig(NamedTuple):
    """Delegate with unlimited authority over every account of the mint."""

    extension_type = ExtensionType.PERMANENT_DELEGATE

    delegate: Pubkey

    def initialize_instruction(self, mint: Pubkey, payer: Pubkey) -> Instruction:
        return initialize_permanent_delegate(mint=mint, delegate=self.delegate)


class NonTransferableConfig(NamedTuple):
    """Tokens of the mint cannot be transferred."""

    extension_type = ExtensionType.NON_TRANSFERABLE

    def initialize_instruction(self, mint: Pubkey, payer: Pubkey) -> Instruction:
        return initialize_non_transferable_mint(mint=mint)


class TransferFeeConfig(NamedTuple):
    """Fee withheld on every transfer."""

    extension_type = ExtensionType.TRANSFER_FEE_CONFIG

    transfer_fee_config_authority: Optional[Pubkey]
    withdraw_withheld_authority: Optional[Pubkey]
    fee_basis_points: int
    max_fee: int

    def initialize_instruction(self, mint: Pubkey, payer: Pubkey) -> Instruction:
        return initialize_transfer_fee_config(
            TransferFeeConfigParams(
                mint=mint,
                transfer_fee_config_authority=self.transfer_fee_config_authority,
                withdraw_withheld_authority=self.withdraw_withheld_authority,
                transfer_fee_basis_points=self.fee_basis_points,
                maximum_fee=self.max_fee,
            )
        )

    @classmethod
    def from_dict(cls, value: Mapping[str, Any]) -> 'TransferFeeConfig':
        return TransferFeeConfig(
            transfer_fee_config_authority=_parse_pubkey(value.get('transfer_fee_config_authority')),
            withdraw_withheld_authority=_parse_pubkey(value.get('withdraw_withheld_authority')),
            fee_basis_points=value['fee_basis_points'],
            max_fee=value['max_fee'],
        )


class InterestBearingConfig(NamedTuple):
    """Interest accrued continuously on the displayed amount."""

    extension_type = ExtensionType.INTEREST_BEARING_CONFIG

    rate_authority: Optional[Pubkey]
    rate: int

    def initialize_instruction(self, mint: Pubkey, payer: Pubkey) -> Instruction:
        return initialize_interest_bearing_mint(
            InterestBearingMintParams(mint=mint, rate_authority=self.rate_authority, rate=self.rate)
        )

    @classmethod
    def from_dict(cls, value: Mapping[str, Any]) -> 'InterestBearingConfig':
        return InterestBearingConfig(
            rate_authority=_parse_pubkey(value.get('rate_authority')),
            rate=value['rate'],
        )


class TransferHookConfig(NamedTuple):
    """Program invoked on every transfer of the mint's tokens."""

    extension_type = ExtensionType.TRANSFER_HOOK

    program_id: Optional[Pubkey]
    authority: Optional[Pubkey]

    def initialize_instruction(self, mint: Pubkey, payer: Pubkey) -> Instruction:
        return initialize_transfer_hook(
            TransferHookParams(mint=mint, authority=self.authority, hook_program_id=self.program_id)
        )

    @classmethod
    def from_dict(cls, value: Mapping[str, Any]) -> 'TransferHookConfig':
        return TransferHookConfig(
            program_id=_parse_pubkey(value.get('program_id')),
            authority=_parse_pubkey(value.get('authority')),
        )


FIELD_NAMES: Tuple[str, ...] = (
    'metadata',
    'close_authority',
    'permanent_delegate',
    'non_transferable',
    'transfer_fee',
    'interest_bearing',
    'transfer_hook',
)
"""Extension fields of `Fungible22Fields`, in their default emission order."""

_FIELD_ALIASES = {'non_transferrable': 'non_transferable'}


class Fungible22Fields(NamedTuple):
    """Extensions requested for a new token-2022 fungible mint."""

    metadata: Optional[MetadataConfig] = None
    close_authority: Optional[Pubkey] = None
    permanent_delegate: Optional[Pubkey] = None
    non_transferable: bool = False
    transfer_fee: Optional[TransferFeeConfig] = None
    interest_bearing: Optional[InterestBearingConfig] = None
    transfer_hook: Optional[TransferHookConfig] = None
    order: Sequence[str] = ()
    """Field names in request order, fields not listed follow in `FIELD_NAMES` order."""

    @classmethod
    def from_dict(cls, value: Mapping[str, Any]) -> 'Fungible22Fields':
        """Reads the JSON shape of a mint request, with addresses as base58 strings.

        The order of the keys is kept as the order of the extension instructions.
        Raises `ValueError` on a malformed address.
        """
        metadata = value.get('metadata')
        transfer_fee = value.get('transfer_fee')
        interest_bearing = value.get('interest_bearing')
        transfer_hook = value.get('transfer_hook')
        non_transferable = value.get('non_transferable', value.get('non_transferrable'))
        order = [_FIELD_ALIASES.get(key, key) for key in value]
        return Fungible22Fields(
            metadata=MetadataConfig.from_dict(metadata) if metadata else None,
            close_authority=_parse_pubkey(value.get('close_authority')),
            permanent_delegate=_parse_pubkey(value.get('permanent_delegate')),
            non_transferable=bool(non_transferable),
            transfer_fee=TransferFeeConfig.from_dict(transfer_fee) if transfer_fee else None,
            interest_bearing=InterestBearingConfig.from_dict(interest_bearing) if interest_bearing else None,
            transfer_hook=TransferHookConfig.from_dict(transfer_hook) if transfer_hook else None,
            order=tuple(name for name in dict.fromkeys(order) if name in FIELD_NAMES),
        )

    def _descriptor(self, name: str) -> Optional[NamedTuple]:
        if name == 'close_authority' and self.close_authority is not None:
            return CloseAuthorityConfig(self.close_authority)
        if name == 'permanent_delegate' and self.permanent_delegate is not None:
            return PermanentDelegateConfig(self.permanent_delegate)
        if name == 'non_transferable':
            return NonTransferableConfig() if self.non_transferable else None
        if name in ('metadata', 'transfer_fee', 'interest_bearing', 'transfer_hook'):
            return getattr(self, name)
        return None

    def descriptors(self) -> List[NamedTuple]:
        """The requested extensions, in the order their instructions are emitted."""
        names = list(dict.fromkeys(list(self.order) + list(FIELD_NAMES)))
        descriptors: List[NamedTuple] = []
        for name in names:
            descriptor = self._descriptor(name)
            if descriptor is not None:
                descriptors.append(descriptor)
        return descriptors
