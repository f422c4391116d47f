"""
This module, 'routes.py', serves the generated daily puzzle to the game client.

Endpoint Descriptions:
- GET /latest.json: The rolling latest artifact, exactly as stored.
- GET /<date>.json: The artifact for one calendar date, exactly as stored.
- POST /check-guess: Checks a guess against the latest puzzle's accepted answers.

The client trusts these artifacts without re-validating them, and every
artifact response carries no-store cache headers.
"""

import re

from flask import Blueprint, Response, current_app

from ...generation.normalize import is_accepted_guess
from ...services.artifact_store import ArtifactStore
from ...services.utils import create_response, no_store, parse_and_validate_request

daily_bp = Blueprint("daily", __name__)

_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def _get_store() -> ArtifactStore:
    return ArtifactStore(current_app.config["CONSTRAINT_DAILY_DIR"])


def _artifact_response(text):
    return no_store(Response(text, status=200, mimetype="application/json"))


@daily_bp.route("/latest.json", methods=["GET"])
def latest_puzzle():
    """
    Returns latest.json verbatim. Its embedded date, not the file name, says
    which day it belongs to.
    """
    text = _get_store().read_raw()
    if text is None:
        return create_response(error="No puzzle has been generated yet.", status_code=404)
    return _artifact_response(text)


@daily_bp.route("/<date>.json", methods=["GET"])
def dated_puzzle(date):
    """Returns the artifact stored for one date."""
    if not _DATE_RE.fullmatch(date):
        return create_response(error="Invalid date.", status_code=400)

    text = _get_store().read_raw(date)
    if text is None:
        return create_response(error=f"No puzzle for {date}.", status_code=404)
    return _artifact_response(text)


@daily_bp.route("/check-guess", methods=["POST"])
def check_guess():
    """
    Compares a guess with the latest puzzle's answer and accepted variants,
    using the same normalization the generator uses.
    Requires JSON payload with guess.
    """
    data, error = parse_and_validate_request(["guess"])
    if error:
        return create_response(error=error, status_code=400)

    guess = data["guess"]
    if not isinstance(guess, str):
        return create_response(error="Invalid guess.", status_code=400)

    puzzle = _get_store().read_latest()
    if puzzle is None:
        return create_response(error="No puzzle has been generated yet.", status_code=404)

    response, status_code = create_response(data={
        "correct": is_accepted_guess(puzzle, guess),
        "date": puzzle.date,
    })
    return no_store(response), status_code
