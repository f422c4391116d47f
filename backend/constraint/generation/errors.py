"""
Error taxonomy for the daily puzzle generation pipeline.

Every per-attempt failure derives from PuzzleGenerationError so the attempt
loop can catch exactly those and let programming errors propagate:

    TransportError  - the model call itself failed (network, auth, quota)
    ParseError      - the model replied, but not with a JSON document
    SchemaError     - JSON decoded, but the shape or bounds are wrong
    QualityError    - shape is fine, but a semantic quality rule rejected it

FatalExhaustionError is raised only when every attempt failed and there is no
prior artifact to fall back on. It is not a PuzzleGenerationError on purpose:
nothing inside the pipeline is allowed to swallow it.
"""


class PuzzleGenerationError(Exception):
    """Base class for failures that consume one generation attempt."""

    kind = "generation"


class TransportError(PuzzleGenerationError):
    """The call to the generative model failed outright."""

    kind = "transport"


class ParseError(PuzzleGenerationError):
    """The model response could not be decoded as JSON."""

    kind = "parse"


class SchemaError(PuzzleGenerationError):
    """A candidate violates the structural puzzle contract."""

    kind = "schema"

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class QualityError(PuzzleGenerationError):
    """A schema-valid puzzle was rejected by the quality gate."""

    kind = "quality"

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Quality check failed: {reason}")


class FatalExhaustionError(Exception):
    """All attempts failed and no fallback artifact exists."""

    def __init__(self, date: str, errors: "list[PuzzleGenerationError]") -> None:
        self.date = date
        self.errors = list(errors)
        last = self.errors[-1] if self.errors else None
        super().__init__(
            f"Generation failed for {date} after {len(self.errors)} attempt(s) "
            f"and no fallback artifact exists. Last error: {last}"
        )
