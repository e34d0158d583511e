from __future__ import annotations

"""
Domain Constants.

Central registry of the tuning values shared by key generation, translation
batching and locale persistence.
"""

from typing import Dict, List

# -----------------------------------------------------------------------------
# LANGUAGES
# -----------------------------------------------------------------------------

SOURCE_LANGUAGE: str = "en"

LANGUAGES: Dict[str, str] = {
    "ko": "Korean (한국어)",
    "zh": "Chinese Simplified (简体中文)",
    "ja": "Japanese (日本語)",
}

DEFAULT_TARGET_LANGUAGES: List[str] = ["ko", "zh", "ja"]

# -----------------------------------------------------------------------------
# KEY GENERATION
# -----------------------------------------------------------------------------

MAX_PATH_DEPTH: int = 4
MAX_KEY_LENGTH: int = 40
MAX_TEXT_PREFIX_LENGTH: int = 50

UNKNOWN_SEGMENT: str = "unknown"
FALLBACK_TEXT_KEY: str = "text"

# Synthetic child receiving a leaf demoted by a deeper key
VALUE_KEY: str = "_value"

# -----------------------------------------------------------------------------
# TRANSLATION BACKEND
# -----------------------------------------------------------------------------

TRANSLATE_MODEL: str = "claude-haiku-4-5-20251001"
CONFIDENCE_MODEL: str = "claude-haiku-4-5-20251001"

TRANSLATE_MAX_TOKENS: int = 4096
CONFIDENCE_MAX_TOKENS: int = 2048

TRANSLATE_BATCH_SIZE: int = 50
CONFIDENCE_BATCH_SIZE: int = 80

MAX_BATCH_RETRIES: int = 2
# Delay unit before retrying a batch after a transport failure
BATCH_RETRY_DELAY: float = 2.0
UNCHANGED_RATIO_THRESHOLD: float = 0.8

PRODUCT_CONTEXT: str = "a professional prop trading and cryptocurrency platform UI"

KEEP_IN_ENGLISH: str = """
Cryptocurrency tickers: BTC, ETH, SOL, USDT, USDC, BNB (and any other crypto tickers)
Financial abbreviations: PnL, P&L, ROI, APY, APR, AML, KYC
Chart indicators: RSI, MACD, EMA, SMA, VWAP, ATR, OBV
Order type abbreviations: OCO, GTC, GTD, IOC, FOK
Brand/product names that are proper nouns
""".strip()

# -----------------------------------------------------------------------------
# PERSISTENCE
# -----------------------------------------------------------------------------

DEFAULT_LOCALES_DIR: str = "locales"
DEFAULT_CACHE_DIR: str = ".cache"
CACHE_FILENAME: str = "translation-cache.json"
CONFIDENCE_FILENAME: str = "confidence.json"
LOG_FILENAME: str = "figma-i18n.log"
