"""
Storage utility.

File I/O helpers for staged documents, normalized tables and query results.
"""

import json
import os
import logging
from typing import Dict, List, Optional
from datetime import datetime

import pandas as pd

from src.models.raw_record import RawRecord

logger = logging.getLogger(__name__)


class StorageManager:
    """
    Manages file I/O for all data persistence.

    Handles:
    - Staged documents (data/staging/<name>.jsonl)
    - Normalized tables (data/tables/<name>.csv)
    - Query results (<output_dir>/<query>.csv + run_metadata.json)
    """

    def __init__(self, data_root: str):
        """
        Initialize storage manager.

        Args:
            data_root: Root data directory (e.g., /path/to/data)
        """
        self.data_root = str(data_root)
        self.staging_dir = os.path.join(self.data_root, "staging")
        self.tables_dir = os.path.join(self.data_root, "tables")

        # Create directories if they don't exist
        os.makedirs(self.staging_dir, exist_ok=True)
        os.makedirs(self.tables_dir, exist_ok=True)

        logger.info(f"Initialized StorageManager with data_root={self.data_root}")

    def save_staged_records(self, name: str, records: List[RawRecord]) -> str:
        """
        Replace the staged documents for name.

        The file is written to a temp path and renamed, so a failed write
        leaves the previous staging data intact.

        Args:
            name: Staging table name (e.g., "reviews")
            records: Raw records to stage

        Returns:
            Path of the staging file
        """
        filepath = os.path.join(self.staging_dir, f"{name}.jsonl")
        temp_path = f"{filepath}.tmp"

        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                for record in records:
                    f.write(json.dumps(record.to_dict()))
                    f.write("\n")
            os.replace(temp_path, filepath)
            logger.info(f"Staged {len(records)} documents to {filepath}")
            return filepath

        except Exception as e:
            logger.error(f"Failed to stage {name}: {e}")
            if os.path.exists(temp_path):
                os.remove(temp_path)
            raise

    def load_staged_records(self, name: str) -> Optional[List[RawRecord]]:
        """
        Load staged documents for name.

        Returns:
            List of RawRecord, or None if nothing has been staged
        """
        filepath = os.path.join(self.staging_dir, f"{name}.jsonl")

        if not os.path.exists(filepath):
            logger.warning(f"No staged documents found for {name}")
            return None

        records = []
        with open(filepath, "r", encoding="utf-8") as f:
            for line in f:
                if line.strip():
                    records.append(RawRecord.from_dict(json.loads(line)))

        logger.debug(f"Loaded {len(records)} staged documents from {filepath}")
        return records

    def save_table(self, name: str, df: pd.DataFrame) -> str:
        """
        Save a normalized table as CSV.

        Returns:
            Path of the CSV file
        """
        filepath = os.path.join(self.tables_dir, f"{name}.csv")

        try:
            df.to_csv(filepath, index=False)
            logger.info(f"Saved table {name} ({len(df)} rows) to {filepath}")
            return filepath
        except Exception as e:
            logger.error(f"Failed to save table {name}: {e}")
            raise

    def load_table(self, name: str) -> Optional[pd.DataFrame]:
        """
        Load a normalized table.

        Returns:
            DataFrame, or None if the table doesn't exist
        """
        filepath = os.path.join(self.tables_dir, f"{name}.csv")

        if not os.path.exists(filepath):
            logger.debug(f"No table found for {name}")
            return None

        return pd.read_csv(filepath)

    def save_query_results(
        self,
        results: Dict[str, pd.DataFrame],
        output_dir: str,
        metadata: Dict = None
    ) -> str:
        """
        Write one CSV per query and a run_metadata.json summary.

        Args:
            results: Query name -> result table
            output_dir: Directory to save outputs
            metadata: Extra fields merged into the metadata file

        Returns:
            Path of the metadata file
        """
        os.makedirs(output_dir, exist_ok=True)

        outputs = {}
        for name, df in results.items():
            output_path = os.path.join(output_dir, f"{name}.csv")
            df.to_csv(output_path, index=False)
            outputs[name] = {"path": output_path, "rows": len(df)}

        metadata_path = os.path.join(output_dir, "run_metadata.json")
        run_metadata = {
            "generated_at": datetime.utcnow().isoformat() + "Z",
            "queries": outputs,
        }
        run_metadata.update(metadata or {})

        with open(metadata_path, "w", encoding="utf-8") as f:
            json.dump(run_metadata, f, indent=2)

        logger.info(f"Saved {len(results)} query results to {output_dir}")
        return metadata_path
