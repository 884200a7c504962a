from __future__ import annotations

import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv

from sales_diff.config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from sales_diff.logging.error_log import ErrorLogBuffer
from sales_diff.logging.init import log_summary, setup_logging
from sales_diff.models.config_models import CompareConfig
from sales_diff.services.ai_summary import SummaryError, attach_ai_summary, openai_client_factory
from sales_diff.services.orchestrator import ComparisonError, compare_files
from sales_diff.services.report import build_report_records
from sales_diff.services.summary import render_summary_line

"""CLI entrypoint.

Flow:
- Load .env (OPENAI_API_KEY for --ai-summary)
- Load config (explicit --config must exist; config/compare.yml is optional)
- Compare baseline vs updated, print one line per added/removed/modified row
- Optionally attach an AI summary
- Print the SUMMARY line

Exit codes: 0 no differences, 2 differences found, 1 fatal error.
"""

EXIT_NO_DIFFERENCES = 0
EXIT_FATAL = 1
EXIT_DIFFERENCES = 2


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Compare two sales ledger spreadsheet exports")
    p.add_argument("baseline", type=Path, help="Baseline (older) .xlsx file")
    p.add_argument("updated", type=Path, help="Updated (newer) .xlsx file")
    p.add_argument("--config", type=Path, default=None, help=f"YAML config (default: {DEFAULT_CONFIG_PATH} if present)")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--ai-summary", action="store_true", help="Attach a natural-language summary (needs OPENAI_API_KEY)")
    return p.parse_args(argv)


def _load_config(path: Path | None) -> CompareConfig:
    if path is not None:
        return load_config(path)
    if DEFAULT_CONFIG_PATH.exists():
        return load_config(DEFAULT_CONFIG_PATH)
    return CompareConfig()


def main(argv: list[str] | None = None) -> int:
    # None のときのみ sys.argv を読む (テストで [] を渡すため)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    logger.debug("debug mode enabled")

    env_path = Path(".env")
    if env_path.exists():
        load_dotenv(dotenv_path=env_path, override=False)

    try:
        cfg = _load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    error_log = ErrorLogBuffer()
    try:
        run = compare_files(args.baseline, args.updated, cfg, error_log=error_log)
    except ComparisonError as e:
        logger.error(f"compare: {e}")
        return EXIT_FATAL
    finally:
        if len(error_log):
            logger.info(f"error log written: {error_log.flush()}")

    for record in build_report_records(
        run.result, tracked_labels=cfg.tracked_labels, subtotal_label=cfg.subtotal_label
    ):
        logger.info(f"{record.kind.value.upper()} [{record.id}] {record.project_name} / {record.customer}: {record.details}")

    if args.ai_summary and run.result.has_differences:
        try:
            result = attach_ai_summary(
                run.result,
                openai_client_factory,
                config=cfg.summary,
                subtotal_label=cfg.subtotal_label,
            )
        except SummaryError as e:
            logger.warning(f"ai summary unavailable, comparison still complete: {e}")
        else:
            run = run.with_result(result)
            logger.info(f"ai summary:\n{run.result.summary}")

    # log_summary 側で "SUMMARY " を付けるため除去
    log_summary(render_summary_line(run)[len("SUMMARY "):])

    return EXIT_DIFFERENCES if run.result.has_differences else EXIT_NO_DIFFERENCES


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
