"""Shared HTTP helpers used by the GitHub client.

Encapsulates common request/timeout error handling so callers avoid
duplicating try/except blocks. Failures are raised as TransportError or
ProtocolError so the entrypoint can report them and choose an exit code.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional, Tuple

import requests

from constants import Constants
from common.errors import ProtocolError, TransportError
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)


def safe_get(
    url: str,
    *,
    context: str,
    headers: Optional[Dict[str, str]] = None,
    timeout: Optional[float] = None,
    **kwargs: Any,
) -> requests.Response:
    """Perform a GET request with consistent error handling and DEBUG traces.

    Args:
        url: Target URL.
        context: Human-readable source tag for logs (e.g., "history", "formula").
        headers: Optional request headers.
        timeout: Seconds before giving up; defaults to Constants.REQUEST_TIMEOUT.
        **kwargs: Passed through to requests.get.

    Returns:
        requests.Response: The HTTP response object (status < 400).

    Raises:
        TransportError: On timeout, connection failure, or an HTTP error status.
    """
    safe_target = safe_url(url)
    timeout = timeout if timeout is not None else Constants.REQUEST_TIMEOUT
    with Timer() as t:
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP request",
                extra=extra_context(
                    event="http_request",
                    component="http_client",
                    action="GET",
                    target=safe_target,
                    context=context
                )
            )
        try:
            res = requests.get(url, headers=headers, timeout=timeout, **kwargs)
        except requests.Timeout as exc:
            raise TransportError(
                f"{context} request timed out after {timeout} seconds"
            ) from exc
        except requests.RequestException as exc:  # includes ConnectionError
            raise TransportError(f"{context} connection error: {exc}") from exc

    if res.status_code >= 400:
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP response error",
                extra=extra_context(
                    event="http_response",
                    component="http_client",
                    action="GET",
                    outcome="http_error",
                    status_code=res.status_code,
                    duration_ms=t.duration_ms(),
                    target=safe_target,
                    context=context
                )
            )
        raise TransportError(
            f"{context} request to {safe_target} failed with HTTP {res.status_code}",
            status_code=res.status_code,
        )

    if is_debug_enabled(logger):
        logger.debug(
            "HTTP response ok",
            extra=extra_context(
                event="http_response",
                component="http_client",
                action="GET",
                outcome="success",
                status_code=res.status_code,
                duration_ms=t.duration_ms(),
                target=safe_target,
                context=context
            )
        )
    return res


def get_json(
    url: str,
    *,
    context: str,
    headers: Optional[Dict[str, str]] = None,
    timeout: Optional[float] = None,
    **kwargs: Any
) -> Tuple[requests.Response, Any]:
    """Perform GET request and parse JSON response with DEBUG traces.

    Args:
        url: Target URL
        context: Human-readable source tag for logs
        headers: Optional request headers
        timeout: Optional request timeout in seconds
        **kwargs: Additional requests.get parameters

    Returns:
        Tuple of (response, parsed_json)

    Raises:
        TransportError: See safe_get.
        ProtocolError: If the body is not valid JSON.
    """
    response = safe_get(url, context=context, headers=headers, timeout=timeout, **kwargs)
    try:
        parsed = json.loads(response.text)
    except (json.JSONDecodeError, TypeError) as exc:
        if is_debug_enabled(logger):
            logger.debug(
                "JSON decode error",
                extra=extra_context(
                    event="parse",
                    component="http_client",
                    action="get_json",
                    outcome="json_decode_error",
                    status_code=response.status_code,
                    target=safe_url(url)
                )
            )
        raise ProtocolError(f"{context} response is not valid JSON") from exc
    return response, parsed
