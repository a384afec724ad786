"""
CSV ingestion pipeline for uploaded property listings.

Parses a complete upload into a candidate generation and hands it to the store
in one swap. Any malformed input aborts the whole upload; the store only ever
changes after every row has validated.
"""
from __future__ import annotations

import csv
import io
from typing import Dict, List, Mapping, NamedTuple, Optional, Sequence

import structlog
from pydantic import ValidationError

from config.settings import settings
from src.japanese_properties.errors import (
    IngestError,
    InvalidRowError,
    MalformedCSVError,
    UploadTooLargeError,
)
from src.japanese_properties.models.property import (
    HEADER_LOOKUP,
    PROPERTY_COLUMNS,
    ColumnSpec,
    PropertyRecord,
    normalize_header,
)
from src.japanese_properties.store.property_store import PropertyStore
from src.japanese_properties.utils.logger import get_logger

logger = get_logger(__name__)

# Largest value accepted by csv.field_size_limit on every platform
MAX_CSV_FIELD_SIZE = 2**31 - 1


def describe_validation_error(
    exc: ValidationError,
    columns: Optional[Mapping[str, ColumnSpec]] = None,
    values: Optional[Mapping[str, str]] = None,
) -> str:
    """
    Flatten pydantic errors into a single human-readable reason.

    Errors on a known column name the type the column expects and the raw
    cell text that was rejected.
    """
    columns = columns or {}
    values = values or {}
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        column = columns.get(error["loc"][0]) if error["loc"] else None
        if column is not None:
            parts.append(
                f"{column.field}: expected {column.kind_label}, "
                f"got {values.get(column.field)!r} ({error['msg']})"
            )
        elif location:
            parts.append(f"{location}: {error['msg']}")
        else:
            parts.append(error["msg"])
    return "; ".join(parts)


class IngestSummary(NamedTuple):
    count: int
    generation: int


class IngestionPipeline:
    """Turns raw CSV uploads into store generations."""

    def __init__(
        self,
        store: PropertyStore,
        id_base: Optional[int] = None,
        max_upload_bytes: Optional[int] = None,
    ):
        self.store = store
        self.id_base = settings.id_base if id_base is None else id_base
        self.max_upload_bytes = (
            settings.max_upload_bytes if max_upload_bytes is None else max_upload_bytes
        )
        # Any single field may be as large as the whole upload
        field_limit = min(self.max_upload_bytes or MAX_CSV_FIELD_SIZE, MAX_CSV_FIELD_SIZE)
        if csv.field_size_limit() < field_limit:
            csv.field_size_limit(field_limit)

    def ingest(self, raw_bytes: bytes) -> int:
        """
        Parse an upload and replace the store contents with it.

        Args:
            raw_bytes: Complete CSV file contents

        Returns:
            Number of records ingested

        Raises:
            IngestError: If the upload is rejected (store left unchanged)
        """
        return self.run(raw_bytes).count

    def run(self, raw_bytes: bytes) -> IngestSummary:
        """
        Same as ``ingest`` but also reports the generation it installed.

        Every log line emitted while the upload is processed, including the
        store swap, carries the upload size and the generation it replaces.
        """
        with structlog.contextvars.bound_contextvars(
            upload_size_bytes=len(raw_bytes),
            replacing_generation=self.store.snapshot().generation,
        ):
            try:
                records = self.parse(raw_bytes)
            except IngestError as exc:
                logger.warning(
                    "ingestion_rejected",
                    error=exc.code,
                    detail=exc.detail,
                    row=exc.row,
                    line=exc.line,
                )
                raise

            generation = self.store.replace_all(records)
            logger.info("ingestion_completed", count=len(records), generation=generation)
        return IngestSummary(count=len(records), generation=generation)

    def parse(self, raw_bytes: bytes) -> List[PropertyRecord]:
        """
        Parse an upload into records without touching the store.

        Args:
            raw_bytes: Complete CSV file contents

        Returns:
            Records in file order with ids assigned from ``id_base``
        """
        if self.max_upload_bytes and len(raw_bytes) > self.max_upload_bytes:
            raise UploadTooLargeError(
                f"Upload is larger than the {self.max_upload_bytes} byte limit"
            )

        text = self._decode(raw_bytes)
        reader = csv.reader(io.StringIO(text, newline=""))

        try:
            header = next(reader, None)
            if not header or not any(cell.strip() for cell in header):
                raise MalformedCSVError("CSV upload is empty; a header row is required", line=1)
            columns = self._resolve_header(header)

            records: List[PropertyRecord] = []
            for raw_row in reader:
                # Blank lines carry no listing and do not consume an id
                if not any(cell.strip() for cell in raw_row):
                    continue
                row_number = len(records) + 1
                records.append(
                    self._build_record(
                        record_id=self.id_base + len(records),
                        raw_row=raw_row,
                        columns=columns,
                        row_number=row_number,
                        line=reader.line_num,
                    )
                )
        except csv.Error as exc:
            raise MalformedCSVError(
                f"Unreadable CSV near line {reader.line_num}: {exc}",
                line=reader.line_num,
            ) from exc

        logger.debug("csv_parsed", row_count=len(records), columns=[c.field for c in columns])
        return records

    @staticmethod
    def _decode(raw_bytes: bytes) -> str:
        try:
            return raw_bytes.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise MalformedCSVError(
                f"CSV upload is not valid UTF-8 (byte offset {exc.start})"
            ) from exc

    @staticmethod
    def _resolve_header(header: Sequence[str]) -> List[ColumnSpec]:
        """Map each header cell to its column descriptor, or fail on mismatch."""
        resolved: List[ColumnSpec] = []
        seen = set()
        unknown = []
        duplicates = []

        for name in header:
            column = HEADER_LOOKUP.get(normalize_header(name))
            if column is None:
                unknown.append(name)
                continue
            if column.field in seen:
                duplicates.append(name)
            seen.add(column.field)
            resolved.append(column)

        missing = [column.field for column in PROPERTY_COLUMNS if column.field not in seen]

        problems = []
        if unknown:
            problems.append(f"unknown columns: {', '.join(repr(n) for n in unknown)}")
        if duplicates:
            problems.append(f"duplicate columns: {', '.join(repr(n) for n in duplicates)}")
        if missing:
            problems.append(f"missing columns: {', '.join(missing)}")
        if problems:
            raise MalformedCSVError("Invalid CSV header; " + "; ".join(problems), line=1)

        return resolved

    @staticmethod
    def _build_record(
        record_id: int,
        raw_row: Sequence[str],
        columns: Sequence[ColumnSpec],
        row_number: int,
        line: int,
    ) -> PropertyRecord:
        if len(raw_row) != len(columns):
            raise InvalidRowError(
                row_number,
                f"expected {len(columns)} columns, found {len(raw_row)}",
                line=line,
            )

        values: Dict[str, str] = {}
        for column, cell in zip(columns, raw_row):
            if column.required and not cell.strip():
                raise InvalidRowError(
                    row_number,
                    f"missing value for required column '{column.field}'",
                    line=line,
                )
            values[column.field] = cell

        try:
            return PropertyRecord(id=record_id, **values)
        except ValidationError as exc:
            raise InvalidRowError(
                row_number,
                describe_validation_error(exc, {c.field: c for c in columns}, values),
                line=line,
            ) from exc
