"""Encode, decode and size-probe helpers over construct layouts."""

from typing import Any

from construct import Construct, ConstructError, FocusedSeq, Terminated  # type: ignore

from codec.errors import CodecError


def encode(layout: Construct, value: Any) -> bytes:
    """Serializes `value` with `layout`.

    Raises `CodecError` when the value is not representable, e.g. an integer
    outside the range of its fixed-width field.
    """
    try:
        return layout.build(value)
    except ConstructError as e:
        raise CodecError(f"Cannot encode {value!r}: {e}") from e


def decode(layout: Construct, data: bytes) -> Any:
    """Parses `data` with `layout`, requiring the whole buffer to be consumed."""
    try:
        return FocusedSeq("value", "value" / layout, Terminated).parse(data)
    except ConstructError as e:
        raise CodecError(f"Malformed payload of {len(data)} bytes: {e}") from e


def packed_len(layout: Construct, value: Any) -> int:
    """Exact serialized length of `value`.

    Layouts are deterministic, so this always agrees with `len(encode(...))`
    for the same value.
    """
    return len(encode(layout, value))
