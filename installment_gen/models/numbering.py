"""Document numbering state."""

from dataclasses import dataclass

from installment_gen.exceptions import ConfigurationError


@dataclass(frozen=True)
class NumberingState:
    """Counter for one document number sequence.

    Numbers are rendered as ``prefix`` followed by the sequence zero-padded
    to ``padding`` digits (``"P-INV-" + "00042"``). ``version`` increments
    every time ``next_number`` advances; the ledger uses it to reject a
    write-back computed from an outdated snapshot.
    """

    prefix: str
    next_number: int = 1
    padding: int = 5
    version: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.prefix, str):
            raise ConfigurationError("prefix must be a string")
        if self.next_number < 1:
            raise ConfigurationError(f"next_number must be >= 1, got {self.next_number}")
        if self.padding < 0:
            raise ConfigurationError(f"padding must be >= 0, got {self.padding}")
        if self.version < 0:
            raise ConfigurationError(f"version must be >= 0, got {self.version}")
