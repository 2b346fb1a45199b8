"""Compute Budget Instructions.

The compute budget program takes no accounts, its instructions are a single
tag byte followed by the little-endian argument.
"""

from enum import IntEnum

from construct import Container, Int8ul, Int32ul, Int64ul, Struct, Switch  # type: ignore

from solders.instruction import Instruction

from codec.encoding import decode, encode
from codec.errors import CodecError
from compute_budget.constants import COMPUTE_BUDGET_PROGRAM_ID


class InstructionType(IntEnum):
    """Compute Budget Instruction Types."""

    REQUEST_UNITS_DEPRECATED = 0
    REQUEST_HEAP_FRAME = 1
    SET_COMPUTE_UNIT_LIMIT = 2
    SET_COMPUTE_UNIT_PRICE = 3
    SET_LOADED_ACCOUNTS_DATA_SIZE_LIMIT = 4


REQUEST_UNITS_DEPRECATED_LAYOUT = Struct(
    "units" / Int32ul,
    "additional_fee" / Int32ul,
)

INSTRUCTIONS_LAYOUT = Struct(
    "instruction_type" / Int8ul,
    "args"
    / Switch(
        lambda this: this.instruction_type,
        {
            InstructionType.REQUEST_UNITS_DEPRECATED: REQUEST_UNITS_DEPRECATED_LAYOUT,
            InstructionType.REQUEST_HEAP_FRAME: Int32ul,
            InstructionType.SET_COMPUTE_UNIT_LIMIT: Int32ul,
            InstructionType.SET_COMPUTE_UNIT_PRICE: Int64ul,
            InstructionType.SET_LOADED_ACCOUNTS_DATA_SIZE_LIMIT: Int32ul,
        },
    ),
)


def _build(instruction_type: InstructionType, args) -> Instruction:
    return Instruction(
        program_id=COMPUTE_BUDGET_PROGRAM_ID,
        accounts=[],
        data=encode(
            INSTRUCTIONS_LAYOUT,
            dict(
                instruction_type=instruction_type,
                args=args,
            )
        )
    )


def request_heap_frame(bytes_: int) -> Instruction:
    """Requests a program heap of `bytes_` bytes, which the runtime requires to be a multiple of 1024."""
    return _build(InstructionType.REQUEST_HEAP_FRAME, bytes_)


def set_compute_unit_limit(units: int) -> Instruction:
    """Sets the compute unit limit the transaction is allowed to consume."""
    return _build(InstructionType.SET_COMPUTE_UNIT_LIMIT, units)


def set_compute_unit_price(micro_lamports: int) -> Instruction:
    """Sets the compute unit price in micro-lamports, raising the transaction's priority."""
    return _build(InstructionType.SET_COMPUTE_UNIT_PRICE, micro_lamports)


def set_loaded_accounts_data_size_limit(bytes_: int) -> Instruction:
    """Sets the transaction-wide limit on the size of loaded account data."""
    return _build(InstructionType.SET_LOADED_ACCOUNTS_DATA_SIZE_LIMIT, bytes_)


def decode_instruction(data: bytes) -> Container:
    """Parses compute budget instruction data into its type and argument."""
    parsed = decode(INSTRUCTIONS_LAYOUT, data)
    try:
        parsed.instruction_type = InstructionType(parsed.instruction_type)
    except ValueError as e:
        raise CodecError(f"Unknown compute budget instruction type {parsed.instruction_type}") from e
    return parsed
