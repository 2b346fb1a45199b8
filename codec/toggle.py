"""Three-state toggle used by partial-update instructions."""

from enum import IntEnum
from typing import Any, Callable, Dict, NamedTuple, Optional

from construct import Construct, Error, Int8ul, Pass, Struct, Switch  # type: ignore


class ToggleKind(IntEnum):
    """Toggle variants, in wire tag order."""

    NONE = 0
    """Leave the field unchanged."""
    CLEAR = 1
    """Remove or reset the field."""
    SET = 2
    """Replace the field with the carried value."""


class Toggle(NamedTuple):
    """A field update that distinguishes "unchanged", "clear" and "set"."""

    kind: ToggleKind = ToggleKind.NONE
    value: Any = None

    @classmethod
    def unchanged(cls) -> "Toggle":
        return cls(ToggleKind.NONE)

    @classmethod
    def clear(cls) -> "Toggle":
        return cls(ToggleKind.CLEAR)

    @classmethod
    def set(cls, value: Any) -> "Toggle":
        if value is None:
            raise ValueError("Toggle.set requires a value, use Toggle.clear() to reset a field")
        return cls(ToggleKind.SET, value)

    @property
    def is_unchanged(self) -> bool:
        return self.kind == ToggleKind.NONE

    def as_container(self, convert: Optional[Callable[[Any], Any]] = None) -> Dict:
        """Builds the value expected by `toggle_layout`.

        `convert` maps a carried value to what the inner layout builds from.
        """
        value = None
        if self.kind == ToggleKind.SET:
            value = convert(self.value) if convert else self.value
        return dict(kind=self.kind, value=value)

    @classmethod
    def decode_container(cls, container, convert: Optional[Callable[[Any], Any]] = None) -> "Toggle":
        kind = ToggleKind(container['kind'])
        if kind == ToggleKind.SET:
            value = container['value']
            return cls(kind, convert(value) if convert else value)
        return cls(kind)


def toggle_layout(value_layout: Construct) -> Construct:
    """One-byte tag, followed by the value only for `SET`."""
    return Struct(
        "kind" / Int8ul,
        "value"
        / Switch(
            lambda this: this.kind,
            {
                ToggleKind.NONE: Pass,
                ToggleKind.CLEAR: Pass,
                ToggleKind.SET: value_layout,
            },
            default=Error,
        ),
    )
