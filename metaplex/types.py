"""Token Metadata program argument types and their borsh layouts."""

from enum import IntEnum
from typing import Any, Callable, List, Mapping, NamedTuple, Optional, Sequence

import borsh_construct as borsh  # type: ignore
from construct import Bytes, Container, Error, Int8ul, Pass, Struct, Switch  # type: ignore

from solders.pubkey import Pubkey

from codec.layouts import BORSH_STRING, PUBLIC_KEY_LAYOUT
from codec.toggle import toggle_layout


def _optional(value: Any, convert: Callable[[Any], Any]) -> Any:
    if value is None:
        return None
    return convert(value)


class TokenStandard(IntEnum):
    """Kind of asset described by a metadata account."""

    NON_FUNGIBLE = 0
    FUNGIBLE_ASSET = 1
    FUNGIBLE = 2
    NON_FUNGIBLE_EDITION = 3
    PROGRAMMABLE_NON_FUNGIBLE = 4
    PROGRAMMABLE_NON_FUNGIBLE_EDITION = 5


class UseMethod(IntEnum):
    """How uses of an asset are consumed."""

    BURN = 0
    MULTIPLE = 1
    SINGLE = 2


class Creator(NamedTuple):
    """Creator of an asset and its share of royalties."""

    address: Pubkey
    verified: bool
    share: int
    """Percentage of royalties, shares of all creators add up to 100."""

    def as_container(self) -> dict:
        return dict(address=self.address, verified=self.verified, share=self.share)

    @classmethod
    def decode_container(cls, container: Container) -> 'Creator':
        return Creator(
            address=container['address'],
            verified=container['verified'],
            share=container['share'],
        )


class Collection(NamedTuple):
    """Collection an asset belongs to."""

    verified: bool
    key: Pubkey

    def as_container(self) -> dict:
        return dict(verified=self.verified, key=self.key)

    @classmethod
    def decode_container(cls, container: Container) -> 'Collection':
        return Collection(verified=container['verified'], key=container['key'])


class Uses(NamedTuple):
    """Limited uses of an asset."""

    use_method: UseMethod
    remaining: int
    total: int

    def as_container(self) -> dict:
        return dict(use_method=self.use_method, remaining=self.remaining, total=self.total)

    @classmethod
    def decode_container(cls, container: Container) -> 'Uses':
        return Uses(
            use_method=UseMethod(container['use_method']),
            remaining=container['remaining'],
            total=container['total'],
        )


class CollectionDetailsKind(IntEnum):
    V1 = 0
    V2 = 1


class CollectionDetails(NamedTuple):
    """Details of a collection parent, either its size or reserved padding."""

    kind: CollectionDetailsKind
    size: int = 0
    """Number of verified items, `V1` only."""
    padding: bytes = bytes(8)
    """Reserved bytes, `V2` only."""

    @classmethod
    def v1(cls, size: int) -> 'CollectionDetails':
        return cls(CollectionDetailsKind.V1, size=size)

    @classmethod
    def v2(cls, padding: bytes = bytes(8)) -> 'CollectionDetails':
        return cls(CollectionDetailsKind.V2, padding=padding)

    def as_container(self) -> dict:
        if self.kind == CollectionDetailsKind.V1:
            return dict(kind=self.kind, value=dict(size=self.size))
        return dict(kind=self.kind, value=dict(padding=self.padding))

    @classmethod
    def decode_container(cls, container: Container) -> 'CollectionDetails':
        kind = CollectionDetailsKind(container['kind'])
        if kind == CollectionDetailsKind.V1:
            return cls.v1(container['value']['size'])
        return cls.v2(container['value']['padding'])


class PrintSupplyKind(IntEnum):
    ZERO = 0
    LIMITED = 1
    UNLIMITED = 2


class PrintSupply(NamedTuple):
    """Number of editions that may be printed from a master edition."""

    kind: PrintSupplyKind
    limit: Optional[int] = None
    """Maximum number of prints, `LIMITED` only."""

    @classmethod
    def zero(cls) -> 'PrintSupply':
        return cls(PrintSupplyKind.ZERO)

    @classmethod
    def limited(cls, limit: int) -> 'PrintSupply':
        return cls(PrintSupplyKind.LIMITED, limit)

    @classmethod
    def unlimited(cls) -> 'PrintSupply':
        return cls(PrintSupplyKind.UNLIMITED)

    def as_container(self) -> dict:
        return dict(kind=self.kind, value=self.limit if self.kind == PrintSupplyKind.LIMITED else None)

    @classmethod
    def decode_container(cls, container: Container) -> 'PrintSupply':
        kind = PrintSupplyKind(container['kind'])
        if kind == PrintSupplyKind.LIMITED:
            return cls.limited(container['value'])
        return cls(kind)


def _creators_container(creators: Optional[Sequence[Creator]]) -> Optional[List[dict]]:
    return _optional(creators, lambda value: [creator.as_container() for creator in value])


def _decode_creators(container: Optional[Sequence[Container]]) -> Optional[List[Creator]]:
    return _optional(container, lambda value: [Creator.decode_container(creator) for creator in value])


class Data(NamedTuple):
    """Mutable metadata fields, as replaced by an update."""

    name: str
    symbol: str
    uri: str
    seller_fee_basis_points: int
    creators: Optional[List[Creator]] = None

    def as_container(self) -> dict:
        return dict(
            name=self.name,
            symbol=self.symbol,
            uri=self.uri,
            seller_fee_basis_points=self.seller_fee_basis_points,
            creators=_creators_container(self.creators),
        )

    @classmethod
    def decode_container(cls, container: Container) -> 'Data':
        return Data(
            name=container['name'],
            symbol=container['symbol'],
            uri=container['uri'],
            seller_fee_basis_points=container['seller_fee_basis_points'],
            creators=_decode_creators(container['creators']),
        )


class DataV2(NamedTuple):
    """Metadata record of an asset."""

    name: str
    symbol: str
    uri: str
    seller_fee_basis_points: int
    creators: Optional[List[Creator]] = None
    collection: Optional[Collection] = None
    uses: Optional[Uses] = None

    def as_container(self) -> dict:
        return dict(
            name=self.name,
            symbol=self.symbol,
            uri=self.uri,
            seller_fee_basis_points=self.seller_fee_basis_points,
            creators=_creators_container(self.creators),
            collection=_optional(self.collection, Collection.as_container),
            uses=_optional(self.uses, Uses.as_container),
        )

    @classmethod
    def decode_container(cls, container: Container) -> 'DataV2':
        return DataV2(
            name=container['name'],
            symbol=container['symbol'],
            uri=container['uri'],
            seller_fee_basis_points=container['seller_fee_basis_points'],
            creators=_decode_creators(container['creators']),
            collection=_optional(container['collection'], Collection.decode_container),
            uses=_optional(container['uses'], Uses.decode_container),
        )


class FungibleFields(NamedTuple):
    """Name, symbol and URI of a fungible asset."""

    name: str
    symbol: str
    uri: str

    def to_data_v2(self) -> DataV2:
        return DataV2(name=self.name, symbol=self.symbol, uri=self.uri, seller_fee_basis_points=0)


class CreateArgsKind(IntEnum):
    V1 = 0


class CreateArgs(NamedTuple):
    """Arguments of the `Create` instruction, version 1."""

    name: str
    symbol: str
    uri: str
    seller_fee_basis_points: int
    token_standard: TokenStandard
    creators: Optional[List[Creator]] = None
    primary_sale_happened: bool = False
    is_mutable: bool = True
    collection: Optional[Collection] = None
    uses: Optional[Uses] = None
    collection_details: Optional[CollectionDetails] = None
    rule_set: Optional[Pubkey] = None
    decimals: Optional[int] = None
    print_supply: Optional[PrintSupply] = None

    @classmethod
    def from_data_v2(cls, data: DataV2, token_standard: TokenStandard, **kwargs) -> 'CreateArgs':
        return cls(
            name=data.name,
            symbol=data.symbol,
            uri=data.uri,
            seller_fee_basis_points=data.seller_fee_basis_points,
            token_standard=token_standard,
            creators=data.creators,
            collection=data.collection,
            uses=data.uses,
            **kwargs,
        )

    def as_container(self) -> dict:
        return dict(
            kind=CreateArgsKind.V1,
            args=dict(
                name=self.name,
                symbol=self.symbol,
                uri=self.uri,
                seller_fee_basis_points=self.seller_fee_basis_points,
                creators=_creators_container(self.creators),
                primary_sale_happened=self.primary_sale_happened,
                is_mutable=self.is_mutable,
                token_standard=self.token_standard,
                collection=_optional(self.collection, Collection.as_container),
                uses=_optional(self.uses, Uses.as_container),
                collection_details=_optional(self.collection_details, CollectionDetails.as_container),
                rule_set=self.rule_set,
                decimals=self.decimals,
                print_supply=_optional(self.print_supply, PrintSupply.as_container),
            ),
        )

    @classmethod
    def decode_container(cls, container: Container) -> 'CreateArgs':
        args = container['args']
        return CreateArgs(
            name=args['name'],
            symbol=args['symbol'],
            uri=args['uri'],
            seller_fee_basis_points=args['seller_fee_basis_points'],
            token_standard=TokenStandard(args['token_standard']),
            creators=_decode_creators(args['creators']),
            primary_sale_happened=args['primary_sale_happened'],
            is_mutable=args['is_mutable'],
            collection=_optional(args['collection'], Collection.decode_container),
            uses=_optional(args['uses'], Uses.decode_container),
            collection_details=_optional(args['collection_details'], CollectionDetails.decode_container),
            rule_set=args['rule_set'],
            decimals=args['decimals'],
            print_supply=_optional(args['print_supply'], PrintSupply.decode_container),
        )


class PayloadTypeKind(IntEnum):
    PUBKEY = 0
    SEEDS = 1
    MERKLE_PROOF = 2
    NUMBER = 3


class PayloadType(NamedTuple):
    """One value of an authorization payload."""

    kind: PayloadTypeKind
    value: Any
    """`Pubkey`, list of seed bytes, list of 32-byte proof nodes, or integer."""

    @classmethod
    def pubkey(cls, value: Pubkey) -> 'PayloadType':
        return cls(PayloadTypeKind.PUBKEY, value)

    @classmethod
    def seeds(cls, value: Sequence[bytes]) -> 'PayloadType':
        return cls(PayloadTypeKind.SEEDS, list(value))

    @classmethod
    def merkle_proof(cls, value: Sequence[bytes]) -> 'PayloadType':
        return cls(PayloadTypeKind.MERKLE_PROOF, list(value))

    @classmethod
    def number(cls, value: int) -> 'PayloadType':
        return cls(PayloadTypeKind.NUMBER, value)

    def as_container(self) -> dict:
        return dict(kind=self.kind, value=self.value)

    @classmethod
    def decode_container(cls, container: Container) -> 'PayloadType':
        kind = PayloadTypeKind(container['kind'])
        value = container['value']
        if kind in (PayloadTypeKind.SEEDS, PayloadTypeKind.MERKLE_PROOF):
            value = [bytes(item) for item in value]
        return cls(kind, value)


class AuthorizationData(NamedTuple):
    """Payload checked by the authorization rules of a programmable asset."""

    payload: Mapping[str, PayloadType]

    def as_container(self) -> dict:
        # maps are serialized with their keys in sorted order
        return dict(payload=[
            (key, self.payload[key].as_container()) for key in sorted(self.payload)
        ])

    @classmethod
    def decode_container(cls, container: Container) -> 'AuthorizationData':
        return AuthorizationData(payload={
            key: PayloadType.decode_container(value) for (key, value) in container['payload']
        })


CREATOR_LAYOUT = borsh.CStruct(
    "address" / PUBLIC_KEY_LAYOUT,
    "verified" / borsh.Bool,
    "share" / borsh.U8,
)

COLLECTION_LAYOUT = borsh.CStruct(
    "verified" / borsh.Bool,
    "key" / PUBLIC_KEY_LAYOUT,
)

USES_LAYOUT = borsh.CStruct(
    "use_method" / borsh.U8,
    "remaining" / borsh.U64,
    "total" / borsh.U64,
)

COLLECTION_DETAILS_LAYOUT = Struct(
    "kind" / Int8ul,
    "value"
    / Switch(
        lambda this: this.kind,
        {
            CollectionDetailsKind.V1: borsh.CStruct("size" / borsh.U64),
            CollectionDetailsKind.V2: borsh.CStruct("padding" / Bytes(8)),
        },
        default=Error,
    ),
)

PRINT_SUPPLY_LAYOUT = Struct(
    "kind" / Int8ul,
    "value"
    / Switch(
        lambda this: this.kind,
        {
            PrintSupplyKind.ZERO: Pass,
            PrintSupplyKind.LIMITED: borsh.U64,
            PrintSupplyKind.UNLIMITED: Pass,
        },
        default=Error,
    ),
)

CREATORS_LAYOUT = borsh.Option(borsh.Vec(CREATOR_LAYOUT))

DATA_LAYOUT = borsh.CStruct(
    "name" / BORSH_STRING,
    "symbol" / BORSH_STRING,
    "uri" / BORSH_STRING,
    "seller_fee_basis_points" / borsh.U16,
    "creators" / CREATORS_LAYOUT,
)

DATA_V2_LAYOUT = borsh.CStruct(
    "name" / BORSH_STRING,
    "symbol" / BORSH_STRING,
    "uri" / BORSH_STRING,
    "seller_fee_basis_points" / borsh.U16,
    "creators" / CREATORS_LAYOUT,
    "collection" / borsh.Option(COLLECTION_LAYOUT),
    "uses" / borsh.Option(USES_LAYOUT),
)

CREATE_ARGS_V1_LAYOUT = borsh.CStruct(
    "name" / BORSH_STRING,
    "symbol" / BORSH_STRING,
    "uri" / BORSH_STRING,
    "seller_fee_basis_points" / borsh.U16,
    "creators" / CREATORS_LAYOUT,
    "primary_sale_happened" / borsh.Bool,
    "is_mutable" / borsh.Bool,
    "token_standard" / borsh.U8,
    "collection" / borsh.Option(COLLECTION_LAYOUT),
    "uses" / borsh.Option(USES_LAYOUT),
    "collection_details" / borsh.Option(COLLECTION_DETAILS_LAYOUT),
    "rule_set" / borsh.Option(PUBLIC_KEY_LAYOUT),
    "decimals" / borsh.Option(borsh.U8),
    "print_supply" / borsh.Option(PRINT_SUPPLY_LAYOUT),
)

CREATE_ARGS_LAYOUT = Struct(
    "kind" / Int8ul,
    "args"
    / Switch(
        lambda this: this.kind,
        {
            CreateArgsKind.V1: CREATE_ARGS_V1_LAYOUT,
        },
        default=Error,
    ),
)

PAYLOAD_TYPE_LAYOUT = Struct(
    "kind" / Int8ul,
    "value"
    / Switch(
        lambda this: this.kind,
        {
            PayloadTypeKind.PUBKEY: PUBLIC_KEY_LAYOUT,
            PayloadTypeKind.SEEDS: borsh.Vec(borsh.Bytes),
            PayloadTypeKind.MERKLE_PROOF: borsh.Vec(Bytes(32)),
            PayloadTypeKind.NUMBER: borsh.U64,
        },
        default=Error,
    ),
)

AUTHORIZATION_DATA_LAYOUT = borsh.CStruct(
    "payload" / borsh.Vec(borsh.TupleStruct(BORSH_STRING, PAYLOAD_TYPE_LAYOUT)),
)

COLLECTION_TOGGLE_LAYOUT = toggle_layout(COLLECTION_LAYOUT)
COLLECTION_DETAILS_TOGGLE_LAYOUT = toggle_layout(COLLECTION_DETAILS_LAYOUT)
USES_TOGGLE_LAYOUT = toggle_layout(USES_LAYOUT)
RULE_SET_TOGGLE_LAYOUT = toggle_layout(PUBLIC_KEY_LAYOUT)
