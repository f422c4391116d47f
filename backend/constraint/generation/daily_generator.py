"""
Daily Generator — the attempt loop that produces exactly one puzzle per day.

Runs once per calendar day from a scheduler and always leaves a playable
artifact behind, or exits non-zero so the scheduler can alert:

  Idempotency: an artifact for the date already exists → copy it to
               latest.json, make no model call, done.
  Retrying:    up to max_tries attempts, strictly sequential. Each attempt is
               one model call run through
                   parse → schema → normalize → quality
               and any TransportError / ParseError / SchemaError /
               QualityError is logged and consumes the attempt.
  Success:     the first passing attempt is written and the loop stops.
  Fallback:    every attempt failed → yesterday's latest.json, if it still
               passes the quality gate, is restamped with today's date and
               "fallback": true.
  Fatal:       every attempt failed and there is no usable latest.json →
               FatalExhaustionError, nothing written.

Usage:
    python -m constraint.generation.daily_generator [--date YYYY-MM-DD]

    # or, from code
    generator = DailyPuzzleGenerator(config, ArtifactStore(config.daily_dir),
                                     AnthropicPuzzleSource(config))
    result = generator.run("2026-10-18")
"""

import argparse
import logging
import sys
from datetime import datetime, timezone
from typing import NamedTuple, Optional

from ..config import ConfigError, GeneratorConfig
from ..services.artifact_store import ArtifactStore
from .errors import FatalExhaustionError, PuzzleGenerationError
from .normalize import PermutationSource, post_process, random_permutation
from .puzzle_source import AnthropicPuzzleSource, PuzzleSource
from .quality import check_quality, ensure_quality
from .schema import Puzzle, validate_candidate

logger = logging.getLogger(__name__)

OUTCOME_EXISTING = "existing"
OUTCOME_GENERATED = "generated"
OUTCOME_FALLBACK = "fallback"


class RunResult(NamedTuple):
    date: str
    outcome: str
    attempts: int
    puzzle: Optional[Puzzle]
    errors: "list[PuzzleGenerationError]"


def today_utc() -> str:
    """The scheduler runs on UTC, so the puzzle date is the UTC date."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%d")


class DailyPuzzleGenerator:

    def __init__(
        self,
        config: GeneratorConfig,
        store: ArtifactStore,
        source: PuzzleSource,
        permutation_source: PermutationSource = random_permutation,
    ) -> None:
        self.config = config
        self.store = store
        self.source = source
        self.permutation_source = permutation_source

    def run(self, date: str) -> RunResult:
        """
        Ensures an artifact exists for the date.

        Raises:
            FatalExhaustionError: All attempts failed and there was no prior
                                  latest.json to fall back on.
        """
        if self.store.exists(date):
            logger.info("Puzzle already exists for %s.", date)
            if not self.store.promote_to_latest(date):
                logger.warning("Existing artifact for %s is unreadable; latest.json left as is", date)
            return RunResult(date, OUTCOME_EXISTING, 0, self.store.read(date), [])

        errors: list[PuzzleGenerationError] = []
        max_tries = self.config.max_tries

        for attempt in range(1, max_tries + 1):
            logger.info("Generating puzzle attempt %d/%d...", attempt, max_tries)
            try:
                puzzle = self._attempt(date)
            except PuzzleGenerationError as exc:
                errors.append(exc)
                logger.warning(
                    "Attempt %d/%d failed (%s): %s", attempt, max_tries, exc.kind, exc,
                )
                continue

            self.store.write(date, puzzle)
            self.store.write_latest(puzzle)
            logger.info(
                "Puzzle generated successfully for %s on attempt %d/%d.",
                date, attempt, max_tries,
            )
            return RunResult(date, OUTCOME_GENERATED, attempt, puzzle, errors)

        return self._fallback(date, errors)

    def _attempt(self, date: str) -> Puzzle:
        """One full pass: model call, schema, normalize, quality."""
        candidate = self.source.generate(date)
        puzzle = validate_candidate(candidate)
        if puzzle.date != date:
            # The prompt pins the date; a model that drifts is corrected, not trusted.
            logger.info("Model returned date %s, restamping to %s", puzzle.date, date)
            puzzle = puzzle.model_copy(update={"date": date})
        # The gate sees exactly the form that gets served.
        return ensure_quality(post_process(puzzle, self.permutation_source))

    def _fallback(self, date: str, errors: "list[PuzzleGenerationError]") -> RunResult:
        previous = self.store.read_latest()
        if previous is not None:
            quality = check_quality(previous)
            if not quality.ok:
                logger.error(
                    "Previous latest.json (%s) fails the quality gate and cannot be reused: %s",
                    previous.date, quality.reason,
                )
                previous = None

        if previous is None:
            logger.error(
                "All %d attempt(s) failed for %s and there is no usable latest.json to reuse.",
                len(errors), date,
            )
            raise FatalExhaustionError(date, errors)

        logger.warning(
            "Falling back to previous latest.json (%s) to avoid a broken day.",
            previous.date,
        )
        puzzle = previous.model_copy(update={"date": date, "fallback": True})
        self.store.write(date, puzzle)
        self.store.write_latest(puzzle)
        return RunResult(date, OUTCOME_FALLBACK, len(errors), puzzle, errors)


# ---------------------------------------------------------------------------
# Command-line entry point
# ---------------------------------------------------------------------------

def _parse_date(value: str) -> str:
    try:
        datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got {value!r}")
    return value


def main(argv: "Optional[list[str]]" = None) -> int:
    from dotenv import load_dotenv

    # Picks up backend/.env when run locally; the scheduler sets real env vars.
    load_dotenv()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    parser = argparse.ArgumentParser(description="Generate the daily Constraint puzzle.")
    parser.add_argument("--date", type=_parse_date, default=None,
                        help="Puzzle date (YYYY-MM-DD). Defaults to today in UTC.")
    parser.add_argument("--daily-dir", default=None,
                        help="Artifact directory. Defaults to CONSTRAINT_DAILY_DIR or ./daily.")
    args = parser.parse_args(argv)

    try:
        config = GeneratorConfig.from_env()
    except ConfigError as exc:
        logger.error("%s", exc)
        return 1

    store = ArtifactStore(args.daily_dir or config.daily_dir)
    generator = DailyPuzzleGenerator(config, store, AnthropicPuzzleSource(config))

    try:
        result = generator.run(args.date or today_utc())
    except FatalExhaustionError as exc:
        logger.error("%s", exc)
        return 1

    logger.info("Done: %s (%s, %d attempt(s))", result.date, result.outcome, result.attempts)
    return 0


if __name__ == "__main__":
    sys.exit(main())
