"""Sequential document numbering with self-healing counters."""

from dataclasses import replace
from typing import Iterable

from installment_gen.models.numbering import NumberingState


def parse_sequence(number: str | None, prefix: str) -> int | None:
    """Return the numeric suffix of ``number`` when it belongs to ``prefix``.

    Only all-digit suffixes count; ``"P-INV-00042"`` gives 42 for prefix
    ``"P-INV-"`` while ``"P-INV-42A"`` and ``"INV-00042"`` give None.
    """
    if not number or not number.startswith(prefix):
        return None
    suffix = number[len(prefix):]
    if not suffix.isascii() or not suffix.isdigit():
        return None
    return int(suffix)


def highest_issued_sequence(prefix: str, numbers: Iterable[str | None]) -> int:
    """Return the largest sequence issued under ``prefix`` (0 if none)."""
    highest = 0
    for number in numbers:
        sequence = parse_sequence(number, prefix)
        if sequence is not None and sequence > highest:
            highest = sequence
    return highest


def next_available_sequence(state: NumberingState, numbers: Iterable[str | None]) -> int:
    """Return the first sequence that is safe to issue.

    The stored counter can lag behind the documents actually issued (manual
    imports, edits), so every issued number is scanned.
    """
    return max(state.next_number, highest_issued_sequence(state.prefix, numbers) + 1)


def format_document_number(prefix: str, sequence: int, padding: int) -> str:
    """Render ``prefix`` + zero-padded ``sequence``."""
    return f"{prefix}{str(sequence).zfill(padding)}"


def advance(state: NumberingState, cursor: int) -> NumberingState:
    """Return ``state`` moved forward to ``cursor``.

    The counter never moves backward; the version only changes when the
    number does.
    """
    if cursor <= state.next_number:
        return state
    return replace(state, next_number=cursor, version=state.version + 1)


def allocate_document_number(
    state: NumberingState,
    numbers: Iterable[str | None],
) -> tuple[str, NumberingState]:
    """Allocate a single document number.

    Parameters
    ----------
    state : NumberingState
        Current counter.
    numbers : Iterable[str | None]
        Every document number already issued in this sequence's collection.

    Returns
    -------
    tuple[str, NumberingState]
        The allocated number and the advanced counter.
    """
    sequence = next_available_sequence(state, numbers)
    number = format_document_number(state.prefix, sequence, state.padding)
    return number, advance(state, sequence + 1)


def claim_document_number(state: NumberingState, number: str) -> NumberingState:
    """Advance ``state`` past a manually entered ``number`` of its sequence."""
    sequence = parse_sequence(number, state.prefix)
    if sequence is None:
        return state
    return advance(state, sequence + 1)
