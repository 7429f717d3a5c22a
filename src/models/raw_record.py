"""
Raw record data model.

An ingested JSON document kept as an untyped tree until projection.
"""

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class RawRecord:
    """
    One JSON object as read from an input file.
    Written once by ingestion, read-only afterwards.
    """
    document: Dict[str, Any] = field(default_factory=dict)
    source: str = ""  # Input file the document came from
    line_number: int = 0  # 1-based line (NDJSON) or element index (JSON array)

    @classmethod
    def from_dict(cls, data: dict) -> "RawRecord":
        """Create RawRecord from a staged JSON dict."""
        return cls(
            document=data["document"],
            source=data.get("source", ""),
            line_number=data.get("line_number", 0)
        )

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "document": self.document,
            "source": self.source,
            "line_number": self.line_number
        }
