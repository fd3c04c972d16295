from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

from ..config.loader import ConfigurationError
from ..excel.reader import SpreadsheetReadError, read_records
from ..logging.error_log import ErrorLogBuffer
from ..models.config_models import FillerConfig
from ..models.error_record import ErrorRecord
from ..models.generation_result import GenerationResult
from ..models.record import Record
from ..pdf.template import PdfTemplate, TemplateError
from .grouping import group_and_sort
from .naming import assign_group_dirnames, record_filename
from .progress import ProgressTracker
from .sinks import OutputSink
from .transform import transform_value

"""Batch orchestration: spreadsheet + template -> one filled PDF per record.

Run outline:
1. Validate the field mapping (ConfigurationError before any I/O)
2. Read the records and the template
3. Group and sort; for each group prepare its output location, then for each
   record fill a fresh template clone, name it and hand it to the sink
4. Return a GenerationResult

Failures below the run level come back as ErrorRecord values from the
per-group and per-record steps and are accumulated in order; they never
escape ``generate_documents``.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "ProcessingError",
    "RecordOutcome",
    "validate_mapping",
    "fill_record",
    "generate_documents",
    "run_batch",
]


class ProcessingError(Exception):
    """Inputs could not be read; the run did not start."""


@dataclass(frozen=True)
class RecordOutcome:
    """Result of producing one record's document."""
    record: Record
    written: str | None = None  # sink location, None when the document was not written
    errors: list[ErrorRecord] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.written is not None


def validate_mapping(field_mapping: object) -> None:
    if not isinstance(field_mapping, dict) or not field_mapping:
        raise ConfigurationError(
            "a non-empty field mapping (template field -> column) is required"
        )


def fill_record(
    record: Record,
    template: PdfTemplate,
    config: FillerConfig,
    group: str,
) -> tuple[bytes, list[ErrorRecord]]:
    """Fill a fresh clone of ``template`` from ``record``.

    A field that cannot be set yields an error entry and the remaining fields
    are still filled.

    Returns:
        (serialized PDF bytes, field errors in mapping order)
    """
    document = template.new_document()
    errors: list[ErrorRecord] = []
    for template_field, column in config.field_mapping.items():
        try:
            value = transform_value(template_field, column, record, config)
            if value is None:
                continue
            document.set_text(template_field, value)
        except Exception as e:
            errors.append(ErrorRecord.field_error(group, record.index, template_field, e))
    return document.to_bytes(), errors


def _process_record(
    record: Record,
    position: int,
    group: str,
    dirname: str,
    template: PdfTemplate,
    config: FillerConfig,
    sink: OutputSink,
) -> RecordOutcome:
    field_errors: list[ErrorRecord] = []
    try:
        data, field_errors = fill_record(record, template, config, group)
        filename = record_filename(record, position, config)
        written = sink.write(dirname, filename, data)
    except Exception as e:
        # field errors found before the failure are still reported
        errors = [*field_errors, ErrorRecord.record_error(group, record.index, e)]
        return RecordOutcome(record=record, errors=errors)
    logger.debug("wrote %s", written)
    return RecordOutcome(record=record, written=written, errors=field_errors)


def _process_group(
    group: str,
    dirname: str,
    records: list[Record],
    template: PdfTemplate,
    config: FillerConfig,
    sink: OutputSink,
    progress: ProgressTracker,
) -> tuple[list[RecordOutcome], ErrorRecord | None]:
    try:
        sink.prepare_group(dirname)
    except Exception as e:
        progress.skip(len(records))
        return [], ErrorRecord.group_error(group, e)

    progress.start_group(group)
    outcomes: list[RecordOutcome] = []
    for position, record in enumerate(records, start=1):
        outcome = _process_record(record, position, group, dirname, template, config, sink)
        progress.finish_record(success=outcome.success)
        outcomes.append(outcome)
    return outcomes, None


def generate_documents(
    records: Sequence[Record],
    template: PdfTemplate,
    config: FillerConfig,
    sink: OutputSink,
) -> GenerationResult:
    """Populate one document per record and hand each to ``sink``.

    Args:
        records: Spreadsheet records in sheet order
        template: Parsed template; each record gets its own clone
        config: Run settings including the field mapping
        sink: Open output sink

    Returns:
        GenerationResult with success count and ordered errors

    Raises:
        ConfigurationError: the field mapping is missing or empty
    """
    validate_mapping(config.field_mapping)
    start_time = datetime.now(UTC)

    groups = group_and_sort(records, config.group_column, config.name_column, config.unknown_group)
    logger.info("%d records in %d groups", len(records), len(groups))
    dirnames = assign_group_dirnames(groups, config)

    success_count = 0
    error_records: list[ErrorRecord] = []

    with ProgressTracker(len(records)) as progress:
        for group, bucket in groups.items():
            logger.debug("group %s: %d records", group, len(bucket))
            outcomes, group_error = _process_group(
                group, dirnames[group], bucket, template, config, sink, progress
            )
            if group_error is not None:
                logger.warning(group_error.to_message())
                error_records.append(group_error)
                continue
            for outcome in outcomes:
                if outcome.success:
                    success_count += 1
                error_records.extend(outcome.errors)

    end_time = datetime.now(UTC)
    return GenerationResult(
        success_count=success_count,
        error_records=error_records,
        total_records=len(records),
        total_groups=len(groups),
        location=sink.location,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
    )


def run_batch(
    excel_path: Path,
    template_path: Path,
    config: FillerConfig,
    sink: OutputSink,
    error_log: ErrorLogBuffer | None = None,
) -> GenerationResult:
    """Read both inputs, generate into ``sink`` and flush the error log.

    Raises:
        ConfigurationError: the field mapping is missing or empty
        ProcessingError: the spreadsheet or the template cannot be read
    """
    validate_mapping(config.field_mapping)

    try:
        sheet = read_records(Path(excel_path), keep_na_strings=config.keep_na_strings)
        template = PdfTemplate.from_path(Path(template_path))
    except (SpreadsheetReadError, TemplateError) as e:
        raise ProcessingError(str(e)) from e
    except Exception as e:
        raise ProcessingError(f"cannot read inputs: {e}") from e

    logger.info("sheet %s: %d records, template %s: %d text fields",
                sheet.sheet_name, len(sheet.records), template.name, len(template.field_names))

    with sink:
        result = generate_documents(sheet.records, template, config, sink)

    if error_log is not None and result.error_records:
        error_log.extend(result.error_records)
        try:
            path = error_log.flush()
            logger.info("error log written to %s", path)
        except OSError as e:
            logger.warning("could not write error log: %s", e)
    return result
