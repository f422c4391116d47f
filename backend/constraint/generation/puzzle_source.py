"""
Puzzle Source — the single call to the generative model.

Sends a fixed instruction payload (the output contract, the allowed classes
and today's date) plus a short user prompt to the Anthropic Messages API and
returns the decoded JSON candidate. The reply is untrusted: nothing here
checks its shape, that is schema.py's job.

There is no retry in this module. Each generate() call is exactly one API
request; the attempt loop in daily_generator.py owns the retry bound.

Usage:
    from constraint.generation.puzzle_source import AnthropicPuzzleSource

    source = AnthropicPuzzleSource(config)
    candidate = source.generate("2026-10-18")   # raises TransportError / ParseError
"""

import json
import logging
import re
from typing import Any, Protocol

import anthropic

from ..config import GeneratorConfig
from .errors import ParseError, TransportError
from .schema import CLASS_LIST

logger = logging.getLogger(__name__)

# Models often wrap JSON in a Markdown fence even when told not to.
_JSON_FENCE_RE = re.compile(r"^```(?:json)?\s*\n?(.*?)\n?\s*```$", re.DOTALL)

USER_PROMPT = (
    "Generate today's puzzle. Keep the answer in the everyday range "
    "(household object or common concept).\n"
    "Make the clues balanced and concrete."
)


class PuzzleSource(Protocol):
    """Anything that can produce one raw candidate for a date."""

    def generate(self, date: str) -> Any:
        ...


def build_system_rules(date: str) -> str:
    """
    Builds the instruction payload describing the exact output contract.

    Kept separate from the API call so tests can inspect the wording.
    """
    lines = [
        'You are generating ONE daily puzzle for a logic game called "Constraint".',
        "",
        "Hard rules:",
        "- Output MUST be valid JSON only. No markdown. No comments.",
        "- Exactly 6 clue classes chosen from the allowed list.",
        "- Exactly 1 clue per class (6 clues total).",
        "- All clues must be POSITIVE, descriptive, and directional.",
        (
            '- NO negations: do not use "not", "never", "no ...", "cannot", '
            '"without", "isn\'t", "doesn\'t", etc.'
        ),
        (
            "- Avoid metaphors as the main clue type. Use a balanced mix: factual + "
            "functional + contextual; at most 1 creative/cognitive clue."
        ),
        "- At least 2 anchor classes must be included among: ontological, functional, contextual.",
        "- Clues must be precise and helpful; each clue should meaningfully narrow the answer.",
        "- The answer must never appear inside any clue.",
        (
            "- Answer must be a single English word or a common two-word phrase "
            "(max 2 words), no proper nouns, no brand names, no profanity."
        ),
        (
            '- Provide an "accepted" list including the answer plus up to 10 very close '
            "synonyms/variants that you would accept as correct (optional but recommended)."
        ),
        "- Ensure the puzzle is fair for general audiences, no niche trivia.",
        "",
        "Allowed classes:",
        ", ".join(CLASS_LIST),
        "",
        "JSON schema:",
        "{",
        f'  "date": "{date}",',
        '  "answer": string,',
        '  "classes": [6 items from allowed classes],',
        '  "clues": [6 strings aligned with classes],',
        '  "explanation": string,',
        '  "accepted": [optional list of strings],',
        '  "difficulty": "easy" | "medium" | "hard"',
        "}",
    ]
    return "\n".join(lines)


def parse_response_text(text: str) -> Any:
    """
    Decodes the model's reply into a Python value.

    Raises:
        ParseError: If the reply is empty or not valid JSON.
    """
    text = (text or "").strip()
    if not text:
        raise ParseError("Empty model output.")

    fenced = _JSON_FENCE_RE.match(text)
    if fenced:
        text = fenced.group(1).strip()

    try:
        return json.loads(text)
    except ValueError as exc:
        raise ParseError(f"Model did not return valid JSON: {exc}") from exc


class AnthropicPuzzleSource:
    """Produces raw puzzle candidates from the Anthropic Messages API."""

    def __init__(self, config: GeneratorConfig) -> None:
        self.config = config
        self.client = anthropic.Anthropic(api_key=config.api_key)

    def generate(self, date: str) -> Any:
        """
        Makes one API call and returns the decoded, unvalidated candidate.

        Raises:
            TransportError: The API call failed (network, auth, rate limit, ...).
            ParseError:     The reply carried no text or no valid JSON.
        """
        try:
            response = self.client.messages.create(
                model=self.config.model,
                max_tokens=self.config.max_tokens,
                temperature=self.config.temperature,
                system=build_system_rules(date),
                messages=[{"role": "user", "content": USER_PROMPT}],
            )
        except anthropic.APIError as exc:
            # Auth and quota failures land here too; they simply burn an attempt.
            raise TransportError(f"Anthropic API error: {exc}") from exc

        text = "".join(
            block.text for block in response.content if block.type == "text"
        )
        logger.debug("Model reply for %s: %s", date, text)
        return parse_response_text(text)
