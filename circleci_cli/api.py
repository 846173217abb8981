"""
HTTP request layer and security helpers for circleci-cli.

Every failure below the client (connection, HTTP status, body decoding) is
reported to callers as ApiError.
"""

import http.client
import json
import logging
import re
import time
import urllib.error
import urllib.parse
import urllib.request

from circleci_cli import config
from circleci_cli.exceptions import ApiError, HTTPError

logger = logging.getLogger(__name__)

TOKEN_QUERY_PARAM = "circle-token"
TOKEN_HEADER = "Circle-Token"

_SENSITIVE_QUERY_KEYS = frozenset({TOKEN_QUERY_PARAM})


# ---------------------------------------------------------------------------
# Security helpers
# ---------------------------------------------------------------------------


def _mask_token(token):
    """Show only first 6 chars of a token for safe logging."""
    return token[:6] + "..." if len(token) > 6 else token


def _sanitize_error(body, max_len=500):
    """Truncate and clean error body for safe display."""
    if not body:
        return ""
    cleaned = re.sub(r"<[^>]+>", "", body)
    cleaned = re.sub(r"\s+", " ", cleaned).strip()
    if len(cleaned) > max_len:
        return cleaned[:max_len] + "... [truncated]"
    return cleaned


def _sanitize_url_for_log(url):
    """Mask the token query param in URLs before logging."""
    parsed = urllib.parse.urlsplit(url)
    if not parsed.query:
        return url
    pairs = urllib.parse.parse_qsl(parsed.query, keep_blank_values=True)
    masked = []
    for key, value in pairs:
        if key.lower() in _SENSITIVE_QUERY_KEYS:
            masked.append((key, "***"))
        else:
            masked.append((key, value))
    safe_query = urllib.parse.urlencode(masked, safe="*/")
    return urllib.parse.urlunsplit(
        (parsed.scheme, parsed.netloc, parsed.path, safe_query, parsed.fragment)
    )


def _error_envelope(message, status=None, detail=None):
    """Build a consistent CLI-safe HTTP error message."""
    suffix = f" (status={status})" if status is not None else ""
    body = f"[ERROR] {message}{suffix}"
    if detail:
        body += f"\n{detail}"
    return body


# ---------------------------------------------------------------------------
# URL construction
# ---------------------------------------------------------------------------


def create_url(base_url, path, params=()):
    """Join base URL, path and ``(key, value)`` params in the order given.

    Values are percent-encoded so branch names such as ``feature/x`` or
    ``a&b`` cannot corrupt the query string. Plain values pass through as-is.
    """
    query = "&".join(f"{key}={urllib.parse.quote(str(value), safe='')}" for key, value in params)
    if not query:
        return f"{base_url}{path}"
    return f"{base_url}{path}?{query}"


# ---------------------------------------------------------------------------
# HTTP request layer
# ---------------------------------------------------------------------------


def _http_request(url, data=None, headers=None, method="GET"):
    """Make one HTTP request and return the parsed JSON body.
    Raises HTTPError for non-2xx responses (caller decides the message).
    Raises ApiError on network, timeout and decode errors."""
    body = json.dumps(data).encode("utf-8") if data is not None else None
    safe_url = _sanitize_url_for_log(url)
    timeout = max(1, config.HTTP_TIMEOUT_SECONDS)
    if body is None:
        logger.info("%s %s", method, safe_url)
    else:
        logger.info("%s %s with body %s", method, safe_url, json.dumps(data, sort_keys=True))

    start = time.perf_counter()
    req = urllib.request.Request(url, data=body, headers=headers or {}, method=method)
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            content_type = resp.headers.get("Content-Type", "")
            raw = resp.read(config.HTTP_MAX_RESPONSE_BYTES + 1)
            if len(raw) > config.HTTP_MAX_RESPONSE_BYTES:
                raise ApiError(
                    "[ERROR] Response too large from CircleCI API "
                    f"(>{config.HTTP_MAX_RESPONSE_BYTES} bytes)."
                )
            logger.debug(
                "%s %s -> %s, %d bytes in %.1f ms",
                method,
                safe_url,
                getattr(resp, "status", 200),
                len(raw),
                (time.perf_counter() - start) * 1000,
            )
            try:
                return json.loads(raw.decode("utf-8"))
            except (json.JSONDecodeError, UnicodeDecodeError):
                if content_type and "json" not in content_type.lower():
                    raise ApiError(
                        f"[ERROR] Unexpected Content-Type from server ({content_type}). "
                        "This may be a proxy or network issue."
                    ) from None
                raise ApiError(
                    "[ERROR] Unexpected response from CircleCI API (not valid JSON)."
                ) from None
    except urllib.error.HTTPError as e:
        error_body = (
            e.read(config.HTTP_MAX_RESPONSE_BYTES).decode("utf-8", errors="replace")
            if e.fp
            else ""
        )
        logger.debug("%s %s -> %s", method, safe_url, e.code)
        raise HTTPError(e.code, e.reason, error_body, headers=e.headers) from e
    except TimeoutError as e:
        raise ApiError(
            _error_envelope(
                f"Request timed out after {timeout} seconds. Is circleci.com reachable?"
            )
        ) from e
    except urllib.error.URLError as e:
        raise ApiError(_error_envelope(f"Connection failed: {e.reason}")) from e
    except http.client.InvalidURL as e:
        raise ApiError(_error_envelope(f"Invalid request URL: {e}")) from e
    except (http.client.HTTPException, OSError) as e:
        raise ApiError(_error_envelope(f"Connection failed: {e}")) from e


def api_request(url, data=None, method="GET", token=None):
    """Authenticated request. ``token`` is sent as the Circle-Token header when given;
    legacy endpoints carry it in the URL instead."""
    headers = {"Accept": "application/json"}
    if data is not None:
        headers["Content-Type"] = "application/json"
    if token:
        headers[TOKEN_HEADER] = token
    try:
        return _http_request(url, data, headers, method)
    except HTTPError as e:
        if e.code in (401, 403):
            raise ApiError(
                f"[TOKEN_INVALID] CircleCI rejected the API token (HTTP {e.code}). "
                f"Check circleci_token in ~/{config.CONFIG_FILENAME}.",
                status=e.code,
            ) from e
        raise ApiError(
            _error_envelope(
                f"HTTP {e.code}: {e.reason}",
                status=e.code,
                detail=_sanitize_error(e.body),
            ),
            status=e.code,
        ) from e
