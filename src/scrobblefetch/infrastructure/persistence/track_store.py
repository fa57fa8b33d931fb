"""File-based persistence for fetched track records (JSON array or CSV table).

Hey future me - this is deliberately dumb glue. The bulk fetcher never touches files; only the
incremental updater asks this store for the newest persisted timestamp and appends the delta.
Format is picked from the file extension on append, so keep the extensions lowercase-insensitive.
"""

import csv
import json
import logging
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path
from typing import Any

from scrobblefetch.domain.entities import TrackRecord
from scrobblefetch.domain.exceptions import StorageError
from scrobblefetch.domain.ports import ITrackStore

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("json", "csv")


def _format_from_path(path: Path) -> str:
    fmt = path.suffix.lower().lstrip(".")
    if fmt not in SUPPORTED_FORMATS:
        raise StorageError(f"Unsupported file format: {path.suffix or '<none>'}", str(path))
    return fmt


class FileTrackStore(ITrackStore):
    """Saves TrackRecords under a data directory with timestamped filenames."""

    def __init__(self, data_dir: Path) -> None:
        self.data_dir = Path(data_dir)

    def save(self, records: Sequence[TrackRecord], fmt: str, prefix: str) -> str:
        """Write records to data_dir/{prefix}_{YYYYmmdd_HHMMSS}.{fmt}.

        Raises:
            StorageError: Unsupported format or the file cannot be written
        """
        fmt = fmt.lower()
        if fmt not in SUPPORTED_FORMATS:
            raise StorageError(f"Unsupported file format: {fmt}")

        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        path = self.data_dir / f"{prefix}_{stamp}.{fmt}"

        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            if fmt == "json":
                self._write_json(path, [record.to_dict() for record in records])
            else:
                self._write_csv(path, records, mode="w", header=True)
        except OSError as e:
            raise StorageError(f"Could not write {path}: {e}", str(path)) from e

        logger.info("Saved %d track(s) to %s", len(records), path)
        return str(path)

    def append(self, records: Sequence[TrackRecord], path: str) -> str:
        """Append records to an existing JSON or CSV file.

        JSON: the array is re-read, extended and rewritten.
        CSV: rows are appended; a header is written first when the file is new or empty.
        """
        file_path = Path(path)
        fmt = _format_from_path(file_path)

        try:
            if fmt == "json":
                existing = self._read_json(file_path) if file_path.exists() else []
                existing.extend(record.to_dict() for record in records)
                self._write_json(file_path, existing)
            else:
                needs_header = not file_path.exists() or file_path.stat().st_size == 0
                self._write_csv(file_path, records, mode="a", header=needs_header)
        except OSError as e:
            raise StorageError(f"Could not append to {file_path}: {e}", path) from e

        logger.info("Appended %d track(s) to %s", len(records), file_path)
        return path

    def latest_timestamp(self, path: str) -> int | None:
        """Max "timestamp" over all persisted rows, None if no row carries one."""
        file_path = Path(path)
        fmt = _format_from_path(file_path)

        try:
            if fmt == "json":
                values = [
                    row.get("timestamp")
                    for row in self._read_json(file_path)
                    if isinstance(row, dict)
                ]
            else:
                with file_path.open(newline="", encoding="utf-8") as handle:
                    values = [row.get("timestamp") for row in csv.DictReader(handle)]
        except OSError as e:
            raise StorageError(f"Could not read {file_path}: {e}", path) from e

        timestamps: list[int] = []
        for value in values:
            if value in (None, ""):
                continue
            try:
                timestamps.append(int(value))
            except (TypeError, ValueError) as e:
                raise StorageError(
                    f"Invalid timestamp {value!r} in {file_path}", path
                ) from e
        return max(timestamps, default=None)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _read_json(path: Path) -> list[dict[str, Any]]:
        with path.open(encoding="utf-8") as handle:
            try:
                data = json.load(handle)
            except json.JSONDecodeError as e:
                raise StorageError(f"{path} is not valid JSON: {e}", str(path)) from e
        if not isinstance(data, list):
            raise StorageError(f"{path} does not contain a JSON array", str(path))
        return data

    @staticmethod
    def _write_json(path: Path, rows: list[dict[str, Any]]) -> None:
        with path.open("w", encoding="utf-8") as handle:
            json.dump(rows, handle, indent=2, ensure_ascii=False)

    @staticmethod
    def _write_csv(
        path: Path, records: Sequence[TrackRecord], mode: str, header: bool
    ) -> None:
        with path.open(mode, newline="", encoding="utf-8") as handle:
            writer = csv.DictWriter(handle, fieldnames=list(TrackRecord.CSV_FIELDS))
            if header:
                writer.writeheader()
            for record in records:
                writer.writerow(record.to_row())
