"""
Budget Calculator - Audit and Serialisation Module.

This module provides JSON serialisation for calculation audit trails.
Dates and timestamps are written as ISO 8601 strings and amounts as
integers, so a snapshot reloads exactly as it was recorded.

Classes:
    AuditEncoder: JSON encoder for dates and policy enums.
    AuditLogger: Manages JSON serialisation for audit and persistence.
"""

import json
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Union

from src import __version__
from src.schema import CalculationSnapshot, MonthlyContribution


class AuditEncoder(json.JSONEncoder):
    """
    JSON encoder for values the standard encoder rejects.

    Converts dates and datetimes to ISO 8601 and enums to their value.
    """

    def default(self, obj: Any) -> Any:
        """
        Encode date, datetime and Enum objects.

        Args:
            obj: Object to encode.

        Returns:
            JSON-serialisable representation.
        """
        if isinstance(obj, (date, datetime)):
            return obj.isoformat()
        if isinstance(obj, Enum):
            return obj.value
        return super().default(obj)


class AuditLogger:
    """
    Manages JSON serialisation for audit and persistence.

    Every snapshot is recorded with its timestamp and the version of
    the calculator that produced it.

    Example:
        >>> logger = AuditLogger()
        >>> json_str = logger.serialise_snapshot(snapshot)
        >>> restored = logger.deserialise_snapshot(json_str)
        >>> assert snapshot.total_amount == restored.total_amount
    """

    def __init__(self, version: str = None):
        """
        Initialises the AuditLogger.

        Args:
            version: Version identifier recorded as the generator.
                     Defaults to package version.
        """
        self._version = version or __version__

    def serialise_snapshot(self, snapshot: CalculationSnapshot) -> str:
        """
        Serialises a CalculationSnapshot to JSON string.

        Args:
            snapshot: Calculation snapshot to serialise.

        Returns:
            JSON string representation.
        """
        data = self._snapshot_to_dict(snapshot)
        return json.dumps(data, cls=AuditEncoder, indent=2)

    def deserialise_snapshot(self, json_str: str) -> CalculationSnapshot:
        """
        Deserialises a JSON string to CalculationSnapshot.

        Args:
            json_str: JSON string to deserialise.

        Returns:
            Reconstructed CalculationSnapshot.

        Raises:
            json.JSONDecodeError: If JSON is malformed.
            KeyError: If required fields are missing.
            ValueError: If dates are malformed.
        """
        data = json.loads(json_str)
        return self._dict_to_snapshot(data)

    def save_to_file(
        self,
        snapshot: CalculationSnapshot,
        file_path: Union[str, Path]
    ) -> None:
        """
        Saves a CalculationSnapshot to a JSON file.

        Args:
            snapshot: Calculation snapshot to save.
            file_path: Output file path.

        Raises:
            PermissionError: If file cannot be written.
        """
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        json_str = self.serialise_snapshot(snapshot)
        file_path.write_text(json_str, encoding="utf-8")

    def load_from_file(self, file_path: Union[str, Path]) -> CalculationSnapshot:
        """
        Loads a CalculationSnapshot from a JSON file.

        Args:
            file_path: Path to JSON file.

        Returns:
            Loaded CalculationSnapshot.

        Raises:
            FileNotFoundError: If file does not exist.
            json.JSONDecodeError: If JSON is malformed.
        """
        file_path = Path(file_path)

        if not file_path.exists():
            raise FileNotFoundError(f"Audit file not found: {file_path}")

        json_str = file_path.read_text(encoding="utf-8")
        return self.deserialise_snapshot(json_str)

    def _snapshot_to_dict(self, snapshot: CalculationSnapshot) -> Dict[str, Any]:
        """
        Converts CalculationSnapshot to dictionary for JSON serialisation.

        Args:
            snapshot: Snapshot to convert.

        Returns:
            Dictionary representation.
        """
        return {
            "metadata": {
                "timestamp": snapshot.timestamp.isoformat(),
                "version": snapshot.version,
                "generated_by": f"Budget Calculator {self._version}",
            },
            "query": {
                "start": snapshot.start.isoformat(),
                "end": snapshot.end.isoformat(),
                "total_days": snapshot.total_days,
            },
            "summary": {
                "total_amount": snapshot.total_amount,
                "budget_count": len(snapshot.contributions),
                "missing_months": list(snapshot.missing_months),
            },
            "contributions": [
                self._contribution_to_dict(c)
                for c in snapshot.contributions
            ],
        }

    def _contribution_to_dict(
        self,
        contribution: MonthlyContribution
    ) -> Dict[str, Any]:
        return {
            "year_month": contribution.year_month,
            "amount": contribution.amount,
            "days_in_month": contribution.days_in_month,
            "daily_rate": contribution.daily_rate,
            "overlapping_days": contribution.overlapping_days,
            "effective_amount": contribution.effective_amount,
        }

    def _dict_to_snapshot(self, data: Dict[str, Any]) -> CalculationSnapshot:
        """
        Converts dictionary to CalculationSnapshot.

        Args:
            data: Dictionary from JSON.

        Returns:
            Reconstructed CalculationSnapshot.
        """
        metadata = data["metadata"]
        query = data["query"]
        summary = data["summary"]

        contributions = [
            MonthlyContribution(
                year_month=c["year_month"],
                amount=int(c["amount"]),
                days_in_month=int(c["days_in_month"]),
                daily_rate=int(c["daily_rate"]),
                overlapping_days=int(c["overlapping_days"]),
                effective_amount=int(c["effective_amount"]),
            )
            for c in data["contributions"]
        ]

        return CalculationSnapshot(
            timestamp=datetime.fromisoformat(metadata["timestamp"]),
            version=metadata["version"],
            start=date.fromisoformat(query["start"]),
            end=date.fromisoformat(query["end"]),
            total_amount=int(summary["total_amount"]),
            contributions=contributions,
            missing_months=list(summary["missing_months"]),
        )

    def generate_filename(self, prefix: str = "audit") -> str:
        """
        Generates a timestamped filename for audit files.

        Args:
            prefix: Filename prefix. Defaults to "audit".

        Returns:
            Filename like "audit_2018-03-10_143052.json".
        """
        timestamp = datetime.now().strftime("%Y-%m-%d_%H%M%S")
        return f"{prefix}_{timestamp}.json"
