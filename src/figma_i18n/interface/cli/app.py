from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, settings resolution
(environment, `.env` file and command-line overrides), credential checks,
pipeline execution and result rendering.
"""

import argparse
import json
import os
import sys
from dataclasses import asdict, replace
from typing import Any, Dict, List, Optional

from figma_i18n.core.pipeline.engine import run_pipeline
from figma_i18n.domain.config import ENV_CACHE_DIR, Settings, load_settings, parse_languages, require_settings
from figma_i18n.domain.constants import DEFAULT_CACHE_DIR
from figma_i18n.domain.errors import ConfigurationError, I18nSyncError
from figma_i18n.domain.pipeline_models import PipelineResult
from figma_i18n.infra.logging import LoggingConfig, configure_logging, default_log_path, get_logger
from figma_i18n.interface.cli import args as cli_args

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG = 2
EXIT_INTERRUPTED = 130

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the main CLI application workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code (0 success, 1 failure, 2 configuration error).
    """
    if sys.platform == "win32":
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding="utf-8")
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding="utf-8")

    # 1. Argument parsing phase
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Logging bootstrap
    configure_logging(LoggingConfig.for_cli(debug=args.debug, log_file=resolve_log_file(args)))
    logger.debug(f"CLI execution initiated: {args.command}")

    # 3. Settings resolution and credential checks
    try:
        settings = apply_overrides(load_settings(), cli_args.args_to_overrides(args))
        require_settings(settings, args.command)
    except ConfigurationError as e:
        logger.error(str(e))
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_CONFIG

    # 4. Pipeline execution phase
    try:
        result = run_pipeline(args.command, settings)
    except KeyboardInterrupt:
        logger.warning("Interrupted by user.")
        print("Interrupted.", file=sys.stderr)
        return EXIT_INTERRUPTED
    except I18nSyncError as e:
        logger.error(f"Pipeline aborted: {e}")
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_FAILURE

    # 5. Output rendering phase
    if args.json_output:
        print(json.dumps(asdict(result), ensure_ascii=False, indent=2))
    else:
        _print_human_summary(result)

    return EXIT_OK if result.ok else EXIT_FAILURE

# -----------------------------------------------------------------------------
# SETTINGS MERGING
# -----------------------------------------------------------------------------

def apply_overrides(settings: Settings, overrides: Dict[str, Any]) -> Settings:
    """
    Apply command-line overrides on top of environment settings.

    Raises:
        ConfigurationError: If an overridden language list is invalid.
    """
    if "target_languages" in overrides:
        overrides = dict(overrides)
        overrides["target_languages"] = parse_languages(",".join(overrides["target_languages"]))
    return replace(settings, **overrides)


def resolve_log_file(args: argparse.Namespace) -> Optional[str]:
    """
    Resolve the log file requested on the command line.

    A bare `--log-file` selects the default file under the cache directory
    (`--cache-dir`, then I18N_CACHE_DIR, then `.cache`).
    """
    if args.log_file is None:
        return None
    if args.log_file:
        return args.log_file
    cache_dir = args.cache_dir or os.environ.get(ENV_CACHE_DIR) or DEFAULT_CACHE_DIR
    return default_log_path(cache_dir)

# -----------------------------------------------------------------------------
# VIEW RENDERING (HUMAN READABLE)
# -----------------------------------------------------------------------------

def _print_human_summary(result: PipelineResult) -> None:
    """Print the outcome of a run on stdout."""
    if not result.ok:
        print(f"ERROR: {result.error}", file=sys.stderr)
        return

    summary = result.summary
    print(f"{result.command}: done ({result.key_count} keys)")

    if result.diff is not None:
        counts = result.diff.counts()
        print(f"  + added:   {counts['added']}")
        print(f"  ~ changed: {counts['changed']}")
        print(f"  - removed: {counts['removed']}")
        if result.diff.is_empty:
            print("No text changes detected.")

    if summary.get("source_path"):
        print(f"  source: {summary['source_path']}")
    if summary.get("skipped_korean"):
        print(f"  skipped {summary['skipped_korean']} Korean annotation nodes")

    for lang, info in summary.get("languages", {}).items():
        if "translated" in info:
            print(
                f"  {lang}: {info['translated']} translated, {info['fallback_keys']} kept English, "
                f"{info['scored']} scored -> {info['path']}"
            )
        else:
            print(f"  {lang}: {info.get('removed', 0)} removed -> {info['path']}")

    for warning in result.warnings:
        print(f"WARNING: {warning}", file=sys.stderr)

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
