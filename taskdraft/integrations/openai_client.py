"""OpenAI-compatible text-completion integration for taskdraft.

This module provides the raw ``complete(prompt) -> str`` call used by the field
extractor. It talks to any OpenAI-compatible chat completions endpoint (OpenAI
itself, or a router configured through ORACLE_BASE_URL).

Every failure is raised as an ``OracleError`` subclass; callers decide how to
degrade. The client makes a single attempt with a bounded timeout.
"""

import os
import logging
from typing import Optional
from openai import OpenAI, APIError, APITimeoutError, APIConnectionError, APIStatusError
from dotenv import load_dotenv

from taskdraft.models.constants import (
    DEFAULT_ORACLE_MODEL,
    DEFAULT_ORACLE_TIMEOUT_SEC,
    ORACLE_MAX_TOKENS,
    ORACLE_TEMPERATURE,
)

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

SYSTEM_MESSAGE = "You are a task extraction assistant. Respond only with valid JSON."


class OracleError(RuntimeError):
    """Base error for text-completion failures."""


class OracleUnavailableError(OracleError):
    """No credential configured; the oracle cannot be called."""


class OracleAuthError(OracleError):
    """The endpoint rejected the credential (401/403)."""


class OracleTimeoutError(OracleError):
    """The request did not complete within the configured timeout."""


class OracleResponseError(OracleError):
    """The endpoint answered, but not with usable content."""


def _timeout_from_env() -> float:
    raw = os.getenv("ORACLE_TIMEOUT_SEC")
    if not raw:
        return DEFAULT_ORACLE_TIMEOUT_SEC
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"Invalid ORACLE_TIMEOUT_SEC {raw!r}. Using {DEFAULT_ORACLE_TIMEOUT_SEC}s.")
        return DEFAULT_ORACLE_TIMEOUT_SEC
    return value if value > 0 else DEFAULT_ORACLE_TIMEOUT_SEC


class OpenAIClient:
    """Client for an OpenAI-compatible chat completions endpoint."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        """Initialize the client.

        Args:
            api_key: Bearer credential. If None, reads ORACLE_API_KEY, then OPENAI_API_KEY.
            base_url: Endpoint base URL. If None, reads ORACLE_BASE_URL (SDK default when unset).
            model: Model name. If None, reads ORACLE_MODEL.
            timeout: Request timeout in seconds. If None, reads ORACLE_TIMEOUT_SEC.

        Note:
            If no API key is available the client still initializes, and every
            call raises OracleUnavailableError. This allows graceful degradation.
        """
        self.api_key = api_key or os.getenv("ORACLE_API_KEY") or os.getenv("OPENAI_API_KEY")
        self.base_url = base_url or os.getenv("ORACLE_BASE_URL") or None
        self.model = model or os.getenv("ORACLE_MODEL") or DEFAULT_ORACLE_MODEL
        self.timeout = timeout if timeout is not None else _timeout_from_env()
        self.client = None

        if self.api_key:
            # Single attempt: the local fallback covers failures, so no SDK retries
            self.client = OpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                timeout=self.timeout,
                max_retries=0,
            )
        else:
            logger.warning("ORACLE_API_KEY not found in environment. Oracle-assisted extraction will not be available.")

    @property
    def available(self) -> bool:
        return self.client is not None

    def complete(self, prompt: str) -> str:
        """Send prompt and return the raw assistant message content.

        Raises:
            OracleUnavailableError: no credential configured
            OracleAuthError: credential rejected
            OracleTimeoutError: request timed out
            OracleResponseError: API error or empty content
        """
        if not self.client:
            raise OracleUnavailableError("Oracle client not initialized")

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_MESSAGE},
                    {"role": "user", "content": prompt},
                ],
                temperature=ORACLE_TEMPERATURE,
                max_tokens=ORACLE_MAX_TOKENS,
            )
        except APITimeoutError as e:
            raise OracleTimeoutError(f"Oracle request timed out after {self.timeout}s") from e
        except APIConnectionError as e:
            raise OracleResponseError("Could not reach oracle endpoint") from e
        except APIStatusError as e:
            status_code = getattr(e, "status_code", None)
            error_code = getattr(e, "code", None)
            if status_code in (401, 403):
                raise OracleAuthError(f"Oracle rejected credential ({status_code})") from e
            if error_code == "insufficient_quota":
                raise OracleResponseError("Oracle quota insufficient") from e
            if status_code == 429:
                raise OracleResponseError("Oracle rate limit exceeded") from e
            # Don't include the full error message as it might contain sensitive info
            raise OracleResponseError(f"Oracle API error: {status_code or 'unknown'} ({error_code or 'unknown'})") from e
        except APIError as e:
            raise OracleResponseError(f"Oracle API error: {type(e).__name__}") from e

        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as e:
            raise OracleResponseError("Oracle response has no message content") from e

        if not content or not content.strip():
            raise OracleResponseError("Oracle returned empty content")

        logger.debug(f"Oracle returned {len(content)} characters")
        return content.strip()
