"""Codec Errors."""


class CodecError(Exception):
    """Raised when a value cannot be encoded or a payload cannot be decoded."""

    pass
