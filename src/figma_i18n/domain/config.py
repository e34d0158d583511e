from __future__ import annotations

"""
Configuration Domain Management.

Resolves runtime settings from the process environment, optionally seeded by
a `.env` file in the working directory, and validates that each command has
the credentials it needs before any network call is attempted.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Tuple

from dotenv import find_dotenv, load_dotenv

from figma_i18n.domain.constants import (
    DEFAULT_CACHE_DIR,
    DEFAULT_LOCALES_DIR,
    DEFAULT_TARGET_LANGUAGES,
    LANGUAGES,
)
from figma_i18n.domain.errors import ConfigurationError

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Environment Variable Names
# -----------------------------------------------------------------------------
ENV_FIGMA_TOKEN = "FIGMA_TOKEN"
ENV_FIGMA_FILE_ID = "FIGMA_FILE_ID"
ENV_FIGMA_PAGE_NAME = "FIGMA_PAGE_NAME"
ENV_ANTHROPIC_API_KEY = "ANTHROPIC_API_KEY"
ENV_LOCALES_DIR = "I18N_LOCALES_DIR"
ENV_CACHE_DIR = "I18N_CACHE_DIR"
ENV_TARGET_LANGUAGES = "I18N_TARGET_LANGUAGES"

# Credentials each CLI command depends on
REQUIRED_BY_COMMAND: Dict[str, Tuple[str, ...]] = {
    "extract": (ENV_FIGMA_TOKEN, ENV_FIGMA_FILE_ID),
    "translate": (ENV_ANTHROPIC_API_KEY,),
    "update": (ENV_FIGMA_TOKEN, ENV_FIGMA_FILE_ID, ENV_ANTHROPIC_API_KEY),
    "sync": (ENV_FIGMA_TOKEN, ENV_FIGMA_FILE_ID, ENV_ANTHROPIC_API_KEY),
}


# -----------------------------------------------------------------------------
# Settings Model
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class Settings:
    """
    Immutable runtime settings for one pipeline run.

    Attributes:
        figma_token: Figma personal access token.
        figma_file_id: Identifier of the design file to extract.
        anthropic_api_key: Claude API key used for translation and scoring.
        page_name: Optional Figma page restricting extraction.
        locales_dir: Directory holding one `<lang>.json` per language.
        cache_dir: Directory holding the snapshot and confidence files.
        target_languages: Ordered target language codes.
    """
    figma_token: str = ""
    figma_file_id: str = ""
    anthropic_api_key: str = ""
    page_name: Optional[str] = None
    locales_dir: str = DEFAULT_LOCALES_DIR
    cache_dir: str = DEFAULT_CACHE_DIR
    target_languages: List[str] = field(default_factory=lambda: list(DEFAULT_TARGET_LANGUAGES))

    def value_of(self, env_name: str) -> str:
        """Return the credential bound to an environment variable name."""
        mapping = {
            ENV_FIGMA_TOKEN: self.figma_token,
            ENV_FIGMA_FILE_ID: self.figma_file_id,
            ENV_ANTHROPIC_API_KEY: self.anthropic_api_key,
        }
        return mapping.get(env_name, "")


# -----------------------------------------------------------------------------
# Loading & Validation
# -----------------------------------------------------------------------------
def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build settings from environment variables.

    When no explicit mapping is supplied, a `.env` file found from the current
    working directory upwards is loaded first. Existing variables win.

    Args:
        environ: Optional mapping used instead of `os.environ` (tests).

    Returns:
        Settings: The resolved settings.
    """
    if environ is None:
        dotenv_path = find_dotenv(usecwd=True)
        if dotenv_path:
            load_dotenv(dotenv_path, override=False)
            logger.debug(f"Config: Loaded environment file {dotenv_path}")
        environ = os.environ

    page_name = (environ.get(ENV_FIGMA_PAGE_NAME) or "").strip() or None
    languages_raw = environ.get(ENV_TARGET_LANGUAGES)

    return Settings(
        figma_token=(environ.get(ENV_FIGMA_TOKEN) or "").strip(),
        figma_file_id=(environ.get(ENV_FIGMA_FILE_ID) or "").strip(),
        anthropic_api_key=(environ.get(ENV_ANTHROPIC_API_KEY) or "").strip(),
        page_name=page_name,
        locales_dir=(environ.get(ENV_LOCALES_DIR) or "").strip() or DEFAULT_LOCALES_DIR,
        cache_dir=(environ.get(ENV_CACHE_DIR) or "").strip() or DEFAULT_CACHE_DIR,
        target_languages=parse_languages(languages_raw) if languages_raw else list(DEFAULT_TARGET_LANGUAGES),
    )


def parse_languages(value: str) -> List[str]:
    """
    Parse a comma-separated list of target language codes.

    Raises:
        ConfigurationError: If a code has no known language name.
    """
    codes: List[str] = []
    for part in value.split(","):
        code = part.strip().lower()
        if code and code not in codes:
            codes.append(code)

    unknown = [c for c in codes if c not in LANGUAGES]
    if unknown:
        supported = ", ".join(LANGUAGES)
        raise ConfigurationError(
            f"Unsupported target language(s): {', '.join(unknown)}. Supported: {supported}."
        )
    if not codes:
        raise ConfigurationError("At least one target language is required.")
    return codes


def require_settings(settings: Settings, command: str) -> Settings:
    """
    Verify that every credential required by a command is present.

    Args:
        settings: Resolved settings.
        command: CLI command about to run.

    Returns:
        Settings: The same settings, for chaining.

    Raises:
        ConfigurationError: Naming every missing variable.
    """
    required = REQUIRED_BY_COMMAND.get(command)
    if required is None:
        raise ConfigurationError(f"Unknown command: {command}")

    missing = [name for name in required if not settings.value_of(name)]
    if missing:
        raise ConfigurationError.for_missing(missing)
    return settings
