"""
Normalizer / Post-Processor.

normalize_word() is the one string comparison used across the product:
guess checking, duplicate-clue detection and answer-in-clue detection all
compare normalized forms. Everything else here turns a puzzle that already
passed the schema and quality gates into its persisted form.
"""

import random
import re
from typing import Callable, Optional, Sequence

from .schema import MAX_ACCEPTED, Puzzle

# Returns a permutation of range(n). Injected so tests can pin the order.
PermutationSource = Callable[[int], "list[int]"]

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_word(s: Optional[str]) -> str:
    """Trims, lowercases and collapses whitespace runs to a single space."""
    return _WHITESPACE_RE.sub(" ", str(s or "").strip().lower())


def canonical_accepted(answer: str, accepted: Sequence[str]) -> "list[str]":
    """
    Builds the de-duplicated, normalized accepted list.

    The normalized answer always comes first, so truncating to MAX_ACCEPTED
    can never drop it no matter how many variants the model supplied.
    """
    result = [normalize_word(answer)]
    seen = set(result)
    for guess in accepted:
        norm = normalize_word(guess)
        if norm in seen:
            continue
        seen.add(norm)
        result.append(norm)
    return result[:MAX_ACCEPTED]


def random_permutation(n: int, rng: Optional[random.Random] = None) -> "list[int]":
    """Fisher-Yates shuffle of range(n)."""
    rng = rng or random.Random()
    order = list(range(n))
    for i in range(n - 1, 0, -1):
        j = rng.randrange(i + 1)
        order[i], order[j] = order[j], order[i]
    return order


def apply_permutation(
    order: Sequence[int],
    classes: Sequence[str],
    clues: Sequence[str],
) -> "tuple[list[str], list[str]]":
    """Reorders classes and clues with the same order so pairs stay aligned."""
    if sorted(order) != list(range(len(classes))) or len(classes) != len(clues):
        raise ValueError(
            f"order {list(order)!r} is not a permutation of {len(classes)} aligned items"
        )
    return [classes[i] for i in order], [clues[i] for i in order]


def post_process(
    puzzle: Puzzle,
    permutation_source: PermutationSource = random_permutation,
) -> Puzzle:
    """
    Returns the final persisted form of a puzzle: canonical accepted list
    plus one synchronized shuffle of classes and clues. The input is untouched.
    """
    order = permutation_source(len(puzzle.classes))
    classes, clues = apply_permutation(order, puzzle.classes, puzzle.clues)
    return puzzle.model_copy(update={
        "accepted": canonical_accepted(puzzle.answer, puzzle.accepted),
        "classes": classes,
        "clues": clues,
    })


def is_accepted_guess(puzzle: Puzzle, guess: str) -> bool:
    """True when the guess matches the answer or any accepted variant."""
    norm = normalize_word(guess)
    if not norm:
        return False
    return norm in canonical_accepted(puzzle.answer, puzzle.accepted)
