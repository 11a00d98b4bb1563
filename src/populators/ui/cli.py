from __future__ import annotations

import argparse
import importlib
import json
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv
from pydantic import ValidationError

from populators.adapters.logging_sink import LoggingFailureSink
from populators.adapters.sqlalchemy import shutdown, startup
from populators.config import ConfigurationError, configure_logging, optional_env_var
from populators.config.storage import DATABASE_URI_VAR
from populators.domain.engine import PopulationEngine, raise_for_failures
from populators.domain.errors import RuleFailure
from populators.domain.record import Phase
from populators.domain.registry import RuleSetRegistry
from populators.ui.schema import BatchPayload, dump_record

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from populators.domain.failures import FailureReport
    from populators.domain.record import Record

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Populate record batches with registered rules")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run = subparsers.add_parser("run", help="Run one batch file through its rule set")
    run.add_argument("batch", type=Path, help="JSON batch file (records and prior records)")
    run.add_argument(
        "--registry",
        required=True,
        help="Rule set registry to use, as 'package.module:attribute'",
    )
    run.add_argument(
        "--record-type",
        help="Record type to resolve in the registry (defaults to the batch's recordType)",
    )
    run.add_argument(
        "--phase",
        choices=[phase.value for phase in Phase],
        help="Lifecycle phase (defaults to the batch's phase, then to 'create')",
    )
    run.add_argument(
        "--database-uri",
        help="Database for SQLAlchemy lookup providers (defaults to POPULATORS_DATABASE_URI)",
    )
    run.add_argument(
        "--output",
        type=Path,
        help="Write the result JSON here instead of stdout",
    )
    run.add_argument(
        "--fail-on-error",
        action="store_true",
        help="Exit with status 1 when any populator failed",
    )

    list_types = subparsers.add_parser("list", help="List record types in a registry")
    list_types.add_argument("--registry", required=True)

    return parser.parse_args(list(argv))


def load_registry(target: str) -> RuleSetRegistry:
    """Import ``module:attribute`` and return the registry it names.

    The attribute may be a registry or a zero-argument callable building one.
    """

    module_name, sep, attribute = target.partition(":")
    if not sep or not module_name or not attribute:
        raise ConfigurationError(f"Registry must look like 'module:attribute', got {target!r}")

    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ConfigurationError(f"Cannot import registry module {module_name!r}") from exc

    candidate = getattr(module, attribute, None)
    if candidate is None:
        raise ConfigurationError(f"{module_name!r} has no attribute {attribute!r}")
    if not isinstance(candidate, RuleSetRegistry) and callable(candidate):
        candidate = candidate()
    if not isinstance(candidate, RuleSetRegistry):
        raise ConfigurationError(f"{target!r} is not a RuleSetRegistry")
    return candidate


def _load_batch(path: Path) -> BatchPayload:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Cannot read batch file {path}: {exc}") from exc
    return BatchPayload.model_validate_json(raw)


def _render_result(
    payload: BatchPayload,
    records: Sequence[Record],
    reports: Sequence[FailureReport],
) -> str:
    document = {
        "recordType": payload.record_type,
        "records": [dump_record(record) for record in records],
        "failures": [
            {
                "recordId": report.record_id,
                "index": report.index,
                "rule": report.rule,
                "stage": str(report.stage),
                "error": report.detail,
            }
            for report in reports
        ],
    }
    return json.dumps(document, indent=2, default=str)


def _run_batch(args: argparse.Namespace) -> None:
    registry = load_registry(args.registry)
    payload = _load_batch(args.batch)

    record_type = args.record_type or payload.record_type
    if record_type is None:
        raise ConfigurationError("No record type given on the command line or in the batch")
    phase = Phase(args.phase) if args.phase else (payload.phase or Phase.CREATE)
    payload.record_type = record_type

    new_records, prior_records = payload.to_records()

    # Without a URI here or in the environment, only providers with their own
    # session factory can query.
    use_database = bool(args.database_uri or optional_env_var(DATABASE_URI_VAR))
    if use_database:
        startup(database_uri=args.database_uri, force=True)

    sink = LoggingFailureSink()
    try:
        reports = registry.run(
            record_type,
            phase,
            new_records,
            prior_records,
            engine=PopulationEngine(sink=sink),
        )
    finally:
        if use_database:
            shutdown()

    log.info(
        "Populated %d %s record(s) on %s with %d failure(s)",
        len(new_records),
        record_type,
        phase,
        len(reports),
    )

    rendered = _render_result(payload, new_records, reports)
    if args.output is None:
        print(rendered)  # noqa: T201
    else:
        args.output.write_text(rendered + "\n", encoding="utf-8")

    if args.fail_on_error:
        raise_for_failures(reports)


def _list_record_types(args: argparse.Namespace) -> None:
    registry = load_registry(args.registry)
    for record_type in registry.record_types():
        print(record_type)  # noqa: T201


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)

    try:
        if parsed_args.command == "run":
            _run_batch(parsed_args)
        elif parsed_args.command == "list":
            _list_record_types(parsed_args)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except (ConfigurationError, ValidationError):
        log.exception("Invalid configuration or batch")
        sys.exit(2)
    except RuleFailure:
        log.exception("Batch finished with populator failures")
        sys.exit(1)
    except Exception:
        log.exception("Fatal error while populating")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def entrypoint() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    entrypoint()
