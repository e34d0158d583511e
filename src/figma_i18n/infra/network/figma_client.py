from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

import requests

from figma_i18n.domain.errors import (
    AuthenticationError,
    BackendUnavailableError,
    NotFoundError,
    RateLimitError,
    RetriesExhaustedError,
    TransientBackendError,
)
from figma_i18n.infra.network.common import USER_AGENT
from figma_i18n.infra.retry import run_with_retries

logger = logging.getLogger(__name__)

FIGMA_API = "https://api.figma.com/v1"

# Large design files can take minutes to serialize
FIGMA_TIMEOUT = 120
FIGMA_MAX_ATTEMPTS = 3
FIGMA_RETRY_DELAY = 3.0


def fetch_figma_document(
        file_id: str,
        token: str,
        *,
        timeout: float = FIGMA_TIMEOUT,
        max_attempts: int = FIGMA_MAX_ATTEMPTS,
        retry_delay: float = FIGMA_RETRY_DELAY,
        sleep: Optional[Callable[[float], None]] = None,
) -> Dict[str, Any]:
    """
    Download the `document` node of a Figma file.

    Geometry and branch data are omitted to keep the payload small. Timeouts,
    connection drops and server errors are retried with a growing delay;
    credential and identifier problems fail immediately.

    Raises:
        AuthenticationError: The token was rejected (HTTP 401/403).
        NotFoundError: The file id does not exist (HTTP 404).
        RateLimitError: Figma throttled the request (HTTP 429).
        BackendUnavailableError: Every attempt failed transiently.
    """
    url = f"{FIGMA_API}/files/{file_id}"
    headers = {"X-Figma-Token": token, "User-Agent": USER_AGENT}
    params = {"geometry": "omit", "branch_data": "false"}

    def attempt(number: int) -> Dict[str, Any]:
        if number > 1:
            logger.warning(f"Figma: retrying request ({number}/{max_attempts})...")
        try:
            response = requests.get(url, headers=headers, params=params, timeout=timeout)
        except requests.exceptions.Timeout as e:
            raise TransientBackendError(f"Figma request timed out after {timeout}s") from e
        except requests.exceptions.ConnectionError as e:
            raise TransientBackendError(f"Figma connection failed: {e}") from e
        return _parse_document_response(response)

    retry_kwargs: Dict[str, Any] = {"sleep": sleep} if sleep is not None else {}
    try:
        document = run_with_retries(
            attempt,
            max_retries=max_attempts - 1,
            backoff_seconds=retry_delay,
            **retry_kwargs,
        )
    except RetriesExhaustedError as e:
        raise BackendUnavailableError(
            f"Figma API request failed ({e.attempts} attempts): {e.last_error}"
        ) from e

    logger.info(f"Figma: document '{document.get('name', file_id)}' loaded.")
    return document


def _parse_document_response(response: requests.Response) -> Dict[str, Any]:
    status = response.status_code
    if status in (401, 403):
        raise AuthenticationError("No access to the Figma file. Check that FIGMA_TOKEN is correct.")
    if status == 404:
        raise NotFoundError("Figma file not found. Check that FIGMA_FILE_ID is correct.")
    if status == 429:
        raise RateLimitError("Figma API rate limit exceeded. Wait a moment and run the command again.")
    if status >= 500:
        raise TransientBackendError(f"Figma API server error (HTTP {status}).")

    try:
        response.raise_for_status()
    except requests.exceptions.HTTPError as e:
        raise BackendUnavailableError(f"Figma API request rejected: {e}") from e

    try:
        payload = response.json()
    except ValueError as e:
        raise TransientBackendError(f"Figma API returned invalid JSON: {e}") from e

    document = payload.get("document") if isinstance(payload, dict) else None
    if not isinstance(document, dict):
        raise TransientBackendError("Figma API response has no document node.")
    return document
