"""
Quality Gate — semantic rules a schema-valid puzzle must also satisfy.

Rules run in a fixed order and the first failure wins, so the reason for a
rejection is deterministic:

  1. six distinct classes
  2. at most one creative_cognitive class
  3. at least two anchor classes (ontological / functional / contextual)
  4. no negation in any clue (clues must be positive and directional)
  5. no duplicate clues
  6. the answer never appears inside a clue
  7. the accepted list contains the answer (holds once post_process ran,
     so the gate is meant for the final, post-processed form)

check_quality() is pure; ensure_quality() is the raising wrapper the attempt
loop uses.
"""

import re
from typing import NamedTuple, Optional

from .errors import QualityError
from .normalize import normalize_word
from .schema import ANCHOR_CLASSES, CLUES_PER_PUZZLE, CREATIVE_CLASS, Puzzle

# English only. Keep this list exact; near-misses like "rarely" are allowed.
_FORBIDDEN_NEGATIONS = [
    re.compile(r"\bnot\b"),
    re.compile(r"\bnever\b"),
    re.compile(r"\bno\s+\w+"),
    re.compile(r"\bcannot\b"),
    re.compile(r"\bcan't\b"),
    re.compile(r"\bdoesn't\b"),
    re.compile(r"\bdoes not\b"),
    re.compile(r"\bisn't\b"),
    re.compile(r"\bis not\b"),
    re.compile(r"\baren't\b"),
    re.compile(r"\bare not\b"),
    re.compile(r"\bwithout\b"),
]

REASON_DUPLICATE_CLASSES = "Classes must be unique (6 different classes)."
REASON_TOO_MANY_CREATIVE = "Max 1 creative_cognitive class."
REASON_TOO_FEW_ANCHORS = (
    "Must include at least 2 anchor classes (ontological/functional/contextual)."
)
REASON_DUPLICATE_CLUES = "Duplicate clues detected."
REASON_ANSWER_IN_CLUE = "Answer appears inside a clue."
REASON_ANSWER_NOT_ACCEPTED = "Accepted list must include the answer."


class QualityResult(NamedTuple):
    ok: bool
    reason: Optional[str] = None


def has_forbidden_negation(text: str) -> bool:
    lowered = text.lower()
    return any(pattern.search(lowered) for pattern in _FORBIDDEN_NEGATIONS)


def check_quality(puzzle: Puzzle) -> QualityResult:
    """Runs every rule in order and reports the first one that fails."""
    if len(set(puzzle.classes)) != CLUES_PER_PUZZLE:
        return QualityResult(False, REASON_DUPLICATE_CLASSES)

    if puzzle.classes.count(CREATIVE_CLASS) > 1:
        return QualityResult(False, REASON_TOO_MANY_CREATIVE)

    anchors = sum(1 for c in puzzle.classes if c in ANCHOR_CLASSES)
    if anchors < 2:
        return QualityResult(False, REASON_TOO_FEW_ANCHORS)

    for clue in puzzle.clues:
        if has_forbidden_negation(clue):
            return QualityResult(False, f'Forbidden negation found in clue: "{clue}"')

    norm_clues = [normalize_word(c) for c in puzzle.clues]
    if len(set(norm_clues)) != len(norm_clues):
        return QualityResult(False, REASON_DUPLICATE_CLUES)

    # An answer that shows up verbatim makes the puzzle trivial.
    answer = normalize_word(puzzle.answer)
    if any(answer in clue for clue in norm_clues):
        return QualityResult(False, REASON_ANSWER_IN_CLUE)

    if answer not in {normalize_word(a) for a in puzzle.accepted}:
        return QualityResult(False, REASON_ANSWER_NOT_ACCEPTED)

    return QualityResult(True)


def ensure_quality(puzzle: Puzzle) -> Puzzle:
    """Returns the puzzle unchanged, or raises QualityError with the reason."""
    result = check_quality(puzzle)
    if not result.ok:
        raise QualityError(result.reason)
    return puzzle
