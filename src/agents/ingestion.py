"""
Ingestion Agent.

Reads review and business JSON documents from local files and keeps them
as untyped records for staging. Projection into typed records happens in
the normalization stage.
"""

import json
import logging
import os
from typing import List

from src.models.raw_record import RawRecord
import config.settings as settings

logger = logging.getLogger(__name__)

MALFORMED_POLICIES = ("fail", "skip")


class IngestionError(ValueError):
    """Raised when an input file contains a malformed document under the fail policy."""


class IngestionAgent:
    """
    Loads JSON documents from a file or a directory of files.

    Supported layouts:
    - Newline-delimited JSON (one object per line, blank lines ignored)
    - A single JSON array of objects

    Malformed documents either abort the whole batch ("fail") or are
    logged and dropped ("skip").
    """

    def __init__(
        self,
        on_malformed: str = "fail",
        file_suffixes: tuple = settings.INPUT_FILE_SUFFIXES
    ):
        """
        Initialize ingestion agent.

        Args:
            on_malformed: "fail" to abort on the first bad document, "skip" to drop it
            file_suffixes: File extensions picked up when loading a directory
        """
        if on_malformed not in MALFORMED_POLICIES:
            raise ValueError(
                f"Invalid on_malformed policy: {on_malformed}. Must be 'fail' or 'skip'"
            )

        self.on_malformed = on_malformed
        self.file_suffixes = file_suffixes
        self.skipped = 0

        logger.info(f"Initialized IngestionAgent with on_malformed={on_malformed}")

    def load(self, path: str) -> List[RawRecord]:
        """
        Load every JSON document found at path.

        Args:
            path: Input file, or directory whose matching files are read in name order

        Returns:
            List of RawRecord objects

        Raises:
            FileNotFoundError: If path does not exist
            IngestionError: On a malformed document when on_malformed="fail"
        """
        path = str(path)
        if not os.path.exists(path):
            raise FileNotFoundError(f"Input path not found: {path}")

        self.skipped = 0
        records = []
        for filepath in self._resolve_files(path):
            records.extend(self._load_file(filepath))

        logger.info(
            f"Ingested {len(records)} documents from {path} "
            f"({self.skipped} malformed documents skipped)"
        )
        return records

    def _resolve_files(self, path: str) -> List[str]:
        """Expand a directory into its matching input files."""
        if os.path.isfile(path):
            return [path]

        files = sorted(
            os.path.join(path, name)
            for name in os.listdir(path)
            if name.endswith(self.file_suffixes)
            and os.path.isfile(os.path.join(path, name))
        )
        if not files:
            logger.warning(f"No input files with suffixes {self.file_suffixes} in {path}")
        return files

    def _load_file(self, filepath: str) -> List[RawRecord]:
        """Parse a single file as a JSON array or as NDJSON."""
        try:
            if self._first_char(filepath) == "[":
                records = self._parse_array(filepath)
            else:
                records = self._parse_lines(filepath)
        except UnicodeDecodeError as e:
            # Undecodable bytes cannot be attributed to a single document
            raise IngestionError(f"Invalid UTF-8 in {filepath}: {e}") from e

        logger.debug(f"Parsed {len(records)} documents from {filepath}")
        return records

    @staticmethod
    def _first_char(filepath: str, chunk_size: int = 4096) -> str:
        """First non-whitespace character after any UTF-8 BOM, or "" for a blank file."""
        with open(filepath, "r", encoding="utf-8-sig") as f:
            while True:
                chunk = f.read(chunk_size)
                if not chunk:
                    return ""
                stripped = chunk.lstrip()
                if stripped:
                    return stripped[0]

    def _parse_array(self, filepath: str) -> List[RawRecord]:
        try:
            with open(filepath, "r", encoding="utf-8-sig") as f:
                documents = json.load(f)
        except json.JSONDecodeError as e:
            # An unreadable array has no recoverable elements
            raise IngestionError(f"Malformed JSON array in {filepath}: {e}") from e

        if not isinstance(documents, list):
            raise IngestionError(f"Expected a JSON array in {filepath}")

        records = []
        for index, document in enumerate(documents, 1):
            if not isinstance(document, dict):
                self._handle_malformed(
                    filepath, index, f"expected an object, got {type(document).__name__}"
                )
                continue
            records.append(RawRecord(document=document, source=filepath, line_number=index))
        return records

    def _parse_lines(self, filepath: str) -> List[RawRecord]:
        """Stream NDJSON one line at a time."""
        records = []
        with open(filepath, "r", encoding="utf-8-sig") as f:
            for line_number, line in enumerate(f, 1):
                if not line.strip():
                    continue

                try:
                    document = json.loads(line)
                except json.JSONDecodeError as e:
                    self._handle_malformed(filepath, line_number, str(e))
                    continue

                if not isinstance(document, dict):
                    self._handle_malformed(
                        filepath, line_number, f"expected an object, got {type(document).__name__}"
                    )
                    continue

                records.append(
                    RawRecord(document=document, source=filepath, line_number=line_number)
                )
        return records

    def _handle_malformed(self, filepath: str, line_number: int, reason: str) -> None:
        message = f"Malformed document at {filepath}:{line_number}: {reason}"
        if self.on_malformed == "fail":
            raise IngestionError(message)

        self.skipped += 1
        logger.warning(f"{message} (skipped)")
