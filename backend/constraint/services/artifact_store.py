"""
Artifact Store for the daily puzzle.

Keeps one JSON file per calendar date plus a rolling latest.json pointer:

    daily/
        2026-10-17.json
        2026-10-18.json
        latest.json        <- always the most recent write, whatever its date

The date inside latest.json is authoritative for consumers, not the file
name. Dated files are create-only; latest.json is overwritten on every
successful run. No locking: the generator runs as a single scheduled job.

Public API
----------
ArtifactStore(root)
    .exists(date)             -> bool
    .read(date)               -> Puzzle | None
    .read_latest()            -> Puzzle | None
    .write(date, puzzle)      -> None   - create-only
    .write_latest(puzzle)     -> None   - always overwrites
    .promote_to_latest(date)  -> bool   - copy a dated file to latest verbatim
"""

import json
import logging
import os
import re
import tempfile
from typing import Optional

from ..generation.errors import SchemaError
from ..generation.schema import Puzzle, validate_candidate

logger = logging.getLogger(__name__)

LATEST_NAME = "latest.json"
ARTIFACT_MODE = 0o644

_DATE_KEY_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


class ArtifactExistsError(Exception):
    """Raised when write() targets a date that already has an artifact."""
    pass


def serialize_puzzle(puzzle: Puzzle) -> str:
    """Pretty-printed JSON with a trailing newline, in persisted key order."""
    return json.dumps(puzzle.to_artifact(), indent=2, ensure_ascii=False) + "\n"


class ArtifactStore:

    def __init__(self, root: str) -> None:
        self.root = root

    # -----------------------------------------------------------------------
    # Paths
    # -----------------------------------------------------------------------

    def path_for(self, date: str) -> str:
        # The date becomes a file name, so it must never carry path segments.
        if not _DATE_KEY_RE.fullmatch(date or ""):
            raise ValueError(f"date must look like YYYY-MM-DD, got {date!r}")
        return os.path.join(self.root, f"{date}.json")

    @property
    def latest_path(self) -> str:
        return os.path.join(self.root, LATEST_NAME)

    # -----------------------------------------------------------------------
    # Reads
    # -----------------------------------------------------------------------

    def exists(self, date: str) -> bool:
        return os.path.exists(self.path_for(date))

    def read(self, date: str) -> Optional[Puzzle]:
        return self._read_path(self.path_for(date))

    def read_latest(self) -> Optional[Puzzle]:
        return self._read_path(self.latest_path)

    def read_raw(self, date: Optional[str] = None) -> Optional[str]:
        """Returns the stored text for a date (or latest when date is None)."""
        path = self.latest_path if date is None else self.path_for(date)
        try:
            with open(path, "r", encoding="utf-8") as fh:
                return fh.read()
        except FileNotFoundError:
            return None

    def _read_path(self, path: str) -> Optional[Puzzle]:
        """
        Loads and re-validates an artifact.

        Anything that is missing, unreadable or no longer schema-valid is
        reported as absent, so a corrupt file can never be served or copied.
        """
        try:
            with open(path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as exc:
            logger.error("Could not read artifact %s: %s", path, exc)
            return None

        try:
            return validate_candidate(data)
        except SchemaError as exc:
            logger.error("Stored artifact %s is not a valid puzzle: %s", path, exc)
            return None

    # -----------------------------------------------------------------------
    # Writes
    # -----------------------------------------------------------------------

    def write(self, date: str, puzzle: Puzzle) -> None:
        """
        Persists the artifact for a date.

        Raises:
            ArtifactExistsError: If an artifact for that date already exists.
            ValueError:          If the puzzle's own date disagrees with the key.
        """
        if puzzle.date != date:
            raise ValueError(f"puzzle is dated {puzzle.date}, cannot store it under {date}")
        path = self.path_for(date)
        if os.path.exists(path):
            raise ArtifactExistsError(f"An artifact for {date} already exists at {path}")
        self._write_text(path, serialize_puzzle(puzzle))
        logger.info("Wrote %s", path)

    def write_latest(self, puzzle: Puzzle) -> None:
        self._write_text(self.latest_path, serialize_puzzle(puzzle))
        logger.info("Updated %s -> %s", self.latest_path, puzzle.date)

    def promote_to_latest(self, date: str) -> bool:
        """
        Copies a dated artifact's bytes to latest.json unchanged.

        Returns False (and leaves latest untouched) when the dated artifact is
        missing or fails validation.
        """
        if self.read(date) is None:
            return False
        self._write_text(self.latest_path, self.read_raw(date))
        logger.info("Updated %s -> %s", self.latest_path, date)
        return True

    def _write_text(self, path: str, text: str) -> None:
        # Write-then-rename so readers never see a half-written artifact.
        os.makedirs(self.root, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.root, prefix=".tmp-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(text)
            # mkstemp creates 0600; the artifacts are served by other users.
            os.chmod(tmp_path, ARTIFACT_MODE)
            os.replace(tmp_path, path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
