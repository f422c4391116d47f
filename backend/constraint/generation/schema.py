"""
Schema Validator — the structural contract for a daily puzzle.

A raw model response is an untrusted *candidate*. validate_candidate() is the
only way to turn one into a Puzzle, and Puzzle is the only type the quality
gate, the normalizer and the artifact store accept. This stage checks shape
and ranges only; semantic rules live in quality.py.

Usage:
    from constraint.generation.schema import validate_candidate

    puzzle = validate_candidate(json.loads(text))   # raises SchemaError
"""

from typing import Annotated, Any, Literal, Optional, get_args

from pydantic import BaseModel, ConfigDict, Field, StrictBool, ValidationError

from .errors import SchemaError

# ---------------------------------------------------------------------------
# Category vocabulary
# ---------------------------------------------------------------------------

# Every puzzle needs at least two of these so the answer stays pin-downable.
ANCHOR_CLASSES = frozenset({"ontological", "functional", "contextual"})

CREATIVE_CLASS = "creative_cognitive"

CLUES_PER_PUZZLE = 6
MAX_ACCEPTED = 25

# Key order of the persisted artifact. fallback is appended only when set.
ARTIFACT_KEYS = (
    "date", "answer", "classes", "clues", "explanation", "accepted", "difficulty",
)

# The closed set of clue classes. Order matters only for the prompt text.
ClueClass = Literal[
    "ontological",
    "functional",
    "contextual",
    "structural",
    "temporal",
    "human_interaction",
    "quantitative",
    "dependency",
    "limitation",
    "representational",
    "social_collective",
    "creative_cognitive",
]
Clue = Annotated[str, Field(min_length=5, max_length=160)]
AcceptedGuess = Annotated[str, Field(min_length=2, max_length=40)]

CLASS_LIST = list(get_args(ClueClass))


class Puzzle(BaseModel):
    """A structurally valid daily puzzle. Immutable; derive with model_copy()."""

    # Unknown keys from the model are dropped rather than rejected.
    model_config = ConfigDict(frozen=True, extra="ignore")

    date: str = Field(pattern=r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")
    answer: str = Field(min_length=2, max_length=40)
    classes: list[ClueClass] = Field(min_length=CLUES_PER_PUZZLE, max_length=CLUES_PER_PUZZLE)
    clues: list[Clue] = Field(min_length=CLUES_PER_PUZZLE, max_length=CLUES_PER_PUZZLE)
    explanation: str = Field(min_length=10, max_length=900)
    accepted: list[AcceptedGuess] = Field(default_factory=list, max_length=MAX_ACCEPTED)
    difficulty: Literal["easy", "medium", "hard"] = "medium"
    fallback: Optional[StrictBool] = None

    def to_artifact(self) -> dict:
        """Returns the JSON-ready dict in persisted key order."""
        artifact = {key: getattr(self, key) for key in ARTIFACT_KEYS}
        artifact["classes"] = list(self.classes)
        artifact["clues"] = list(self.clues)
        artifact["accepted"] = list(self.accepted)
        if self.fallback:
            artifact["fallback"] = True
        return artifact


def _format_location(loc: tuple) -> str:
    return ".".join(str(part) for part in loc) or "<root>"


def validate_candidate(candidate: Any) -> Puzzle:
    """
    Validates an untrusted candidate and returns a new Puzzle.

    The candidate itself is never modified.

    Raises:
        SchemaError: naming the first violated field constraint.
    """
    try:
        return Puzzle.model_validate(candidate)
    except ValidationError as exc:
        first = exc.errors()[0]
        raise SchemaError(_format_location(first["loc"]), first["msg"]) from exc
