from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema and converts the parsed namespace into
settings overrides understood by the configuration layer.
"""

import argparse
from typing import Any, Dict, List, Optional

from figma_i18n.core.pipeline.engine import COMMANDS

COMMAND_HELP = """commands:
  extract    Extract Figma text into locales/en.json
  translate  Translate locales/en.json into every target language
  update     Detect Figma changes and update every locale file
  sync       Run extract and translate in one go (first setup)

examples:
  figma-i18n sync         # first run
  figma-i18n update       # after a Figma change
  figma-i18n translate    # re-run translation only
"""

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the figma-i18n CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="figma-i18n",
        description="Extract Figma UI text, generate i18n keys and translate locale files.",
        epilog=COMMAND_HELP,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    p.add_argument("command", choices=COMMANDS, help="Pipeline command to run.")

    # --- Source Selection ---
    p.add_argument(
        "--page",
        dest="page_name",
        default=None,
        help="Only extract the Figma page with this name (overrides FIGMA_PAGE_NAME).",
    )

    # --- Output Locations ---
    p.add_argument(
        "--locales-dir",
        dest="locales_dir",
        default=None,
        help="Directory of the <lang>.json locale documents.",
    )
    p.add_argument(
        "--cache-dir",
        dest="cache_dir",
        default=None,
        help="Directory of the snapshot and confidence files.",
    )
    p.add_argument(
        "--languages",
        dest="languages",
        default=None,
        help="Comma-separated target languages, e.g. 'ko,ja'.",
    )

    # --- Diagnostics ---
    p.add_argument(
        "--log-file",
        dest="log_file",
        nargs="?",
        const="",
        default=None,
        help="Also write logs to a rotating file (default: <cache-dir>/logs/figma-i18n.log).",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print the run result as JSON.",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into settings overrides.

    Only options given on the command line appear in the result.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Settings field -> value.
    """
    overrides: Dict[str, Any] = {}

    if args.page_name:
        overrides["page_name"] = args.page_name.strip()
    if args.locales_dir:
        overrides["locales_dir"] = args.locales_dir
    if args.cache_dir:
        overrides["cache_dir"] = args.cache_dir

    languages = _split_csv(args.languages)
    if languages:
        overrides["target_languages"] = [code.lower() for code in languages]

    return overrides

# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def _split_csv(value: Optional[str]) -> Optional[List[str]]:
    """
    Convert a comma-separated string into a list of sanitized strings.
    """
    if value is None:
        return None
    parts = [x.strip() for x in value.split(",")]
    return [x for x in parts if x]
