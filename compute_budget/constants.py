"""Compute Budget Constants."""

from enum import Enum

from solders.pubkey import Pubkey

COMPUTE_BUDGET_PROGRAM_ID = Pubkey.from_string("ComputeBudget111111111111111111111111111111")
"""Public key that identifies the Compute Budget program."""

DEFAULT_COMPUTE_UNITS: int = 200_000
"""Compute unit limit requested for create transactions."""

UPDATE_COMPUTE_UNITS: int = 50_000
"""Compute unit limit requested for metadata update transactions."""


class Priority(Enum):
    """Coarse priority fee level.

    Not consumed by any instruction builder yet, callers map it to a unit price.
    """

    NONE = "None"
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    MAX = "Max"

    @classmethod
    def from_str(cls, value: str) -> 'Priority':
        for priority in cls:
            if priority.value.lower() == value.lower():
                return priority
        raise ValueError(f"Invalid priority: {value!r}")

    def __str__(self) -> str:
        return self.value
