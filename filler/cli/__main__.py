from __future__ import annotations

import argparse
import dataclasses
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from filler.config.loader import (
    DEFAULT_CONFIG_PATH,
    ConfigurationError,
    load_config,
    load_mapping,
    save_mapping,
)
from filler.excel.reader import SpreadsheetReadError, list_columns
from filler.logging.error_log import ErrorLogBuffer
from filler.logging.init import log_summary, setup_logging
from filler.models.config_models import FillerConfig
from filler.pdf.template import PdfTemplate, TemplateError
from filler.services.matcher import auto_match, suggest_overrides
from filler.services.orchestrator import ProcessingError, run_batch
from filler.services.sinks import DirectorySink, SinkError, ZipSink
from filler.services.summary import render_result_message, render_summary_line

"""CLI entrypoint.

Flow:
- Load .env, then the YAML config (explicit --config, FILLER_CONFIG, or
  config/filler.yml when present; built-in defaults otherwise)
- Resolve the field mapping: --mapping file, else the config's mapping,
  else auto-matched from the template fields and the sheet headers
- --inspect / --write-mapping stop after showing / saving the mapping
- Otherwise generate into a directory (or a zip archive with --zip) and
  log the result message, each error line and the SUMMARY line

Exit codes: 0 every record written cleanly, 2 completed with errors,
1 fatal (configuration, unreadable inputs, unusable output location).
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2

CONFIG_ENV_VAR = "FILLER_CONFIG"
LOGS_DIR_ENV_VAR = "FILLER_LOGS_DIR"


def _load_env_file(path: Path, override: bool = False) -> None:
    """Load .env using python-dotenv; a missing file is not an error."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="pdf-batch-filler",
        description="Fill a PDF form template once per spreadsheet row",
    )
    p.add_argument("--excel", type=Path, help="Spreadsheet (.xlsx); first sheet, first row = headers")
    p.add_argument("--template", type=Path, help="Fillable PDF template")
    p.add_argument("--output", type=Path, help="Output directory (or archive path with --zip)")
    p.add_argument("--zip", action="store_true", help="Write all PDFs into one zip archive")
    p.add_argument("--config", type=Path, help=f"YAML config (default {DEFAULT_CONFIG_PATH})")
    p.add_argument("--mapping", type=Path, help="YAML mapping file (field_mapping / override_mapping)")
    p.add_argument("--inspect", action="store_true", help="Print headers, template fields and the proposed mapping, then exit")
    p.add_argument("--write-mapping", type=Path, metavar="PATH", help="Save the resolved mapping as YAML, then exit")
    p.add_argument("--logs-dir", type=Path, help="Directory for the JSON Lines error log")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _resolve_config(args: argparse.Namespace) -> FillerConfig:
    explicit = args.config or (Path(os.environ[CONFIG_ENV_VAR]) if os.getenv(CONFIG_ENV_VAR) else None)
    if explicit is not None:
        return load_config(explicit)
    if DEFAULT_CONFIG_PATH.exists():
        return load_config(DEFAULT_CONFIG_PATH)
    return FillerConfig()


def _resolve_mapping(
    args: argparse.Namespace, cfg: FillerConfig, columns: list[str], fields: list[str]
) -> FillerConfig:
    if args.mapping is not None:
        mapping, overrides = load_mapping(args.mapping)
        return dataclasses.replace(cfg, field_mapping=mapping, override_mapping=overrides)
    if cfg.field_mapping:
        return cfg
    mapping = auto_match(fields, columns)
    overrides = cfg.override_mapping or suggest_overrides(mapping, columns)
    return dataclasses.replace(cfg, field_mapping=mapping, override_mapping=overrides)


def _inspect(logger: logging.Logger, cfg: FillerConfig, columns: list[str], fields: list[str]) -> int:
    print(f"COLUMNS ({len(columns)}):")
    for col in columns:
        print(f"  {col}")
    print(f"TEMPLATE FIELDS ({len(fields)}):")
    for name in fields:
        print(f"  {name}")
    print("MAPPING:")
    for name in fields:
        print(f"  {name} <- {cfg.field_mapping.get(name, '(unmapped)')}")
    unknown = [name for name in cfg.field_mapping if name not in fields]
    for name in unknown:
        print(f"  {name} <- {cfg.field_mapping[name]} (unknown template field)")
    for name, col in cfg.override_mapping.items():
        print(f"  {name} <- {col} (when '{cfg.other_sentinel}')")
    mapped = sum(1 for name in fields if name in cfg.field_mapping)
    logger.info(f"mapped {mapped}/{len(fields)} template fields")
    if unknown:
        logger.warning(f"{len(unknown)} mapped fields are not text fields of the template: {', '.join(unknown)}")
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    # An empty list (tests) must not fall through to sys.argv
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    _load_env_file(Path(".env"))

    try:
        cfg = _resolve_config(args)
    except ConfigurationError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.excel is None or args.template is None:
        logger.error("both --excel and --template are required")
        return EXIT_FATAL

    try:
        columns = list_columns(args.excel)
        fields = PdfTemplate.from_path(args.template).field_names
    except (SpreadsheetReadError, TemplateError) as e:
        logger.error(f"input: {e}")
        return EXIT_FATAL

    try:
        cfg = _resolve_mapping(args, cfg, columns, fields)
    except ConfigurationError as e:
        logger.error(f"mapping: {e}")
        return EXIT_FATAL

    if args.inspect:
        return _inspect(logger, cfg, columns, fields)

    if args.write_mapping is not None:
        try:
            path = save_mapping(args.write_mapping, cfg.field_mapping, cfg.override_mapping)
        except OSError as e:
            logger.error(f"mapping: cannot write {args.write_mapping}: {e}")
            return EXIT_FATAL
        logger.info(f"mapping written to {path} ({len(cfg.field_mapping)} fields)")
        return EXIT_SUCCESS_ALL

    if args.output is None:
        logger.error("--output is required to generate documents")
        return EXIT_FATAL

    sink = ZipSink(args.output) if args.zip else DirectorySink(args.output)
    logs_dir = args.logs_dir or (Path(os.environ[LOGS_DIR_ENV_VAR]) if os.getenv(LOGS_DIR_ENV_VAR) else None)
    error_log = ErrorLogBuffer(logs_dir)

    try:
        result = run_batch(args.excel, args.template, cfg, sink, error_log=error_log)
    except ConfigurationError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL
    except SinkError as e:
        logger.error(f"output: {e}")
        return EXIT_FATAL

    logger.info(render_result_message(result))
    for line in result.errors:
        logger.warning(line)

    # log_summary adds the "SUMMARY " label itself
    log_summary(render_summary_line(result).removeprefix("SUMMARY "))

    if result.has_errors:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
