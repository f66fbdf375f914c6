from __future__ import annotations

"""Lightweight HTTP client util with retry.

Uses stdlib urllib; the lookups only need GET JSON with limited retries.
Client errors (4xx) are not retried and keep their status code so callers can
tell an invalid key from a missing resource.
"""
import http.client
import json
import logging
import time
import urllib.error
import urllib.parse
import urllib.request
from typing import Any, Dict, Mapping, Optional

logger = logging.getLogger("tripbook.http")


class HttpError(Exception):
    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


def build_url(url: str, params: Optional[Mapping[str, Any]] = None) -> str:
    if not params:
        return url
    query = urllib.parse.urlencode({k: v for k, v in params.items() if v is not None})
    sep = "&" if "?" in url else "?"
    return f"{url}{sep}{query}"


def get_json(
    url: str,
    *,
    params: Optional[Mapping[str, Any]] = None,
    timeout: float = 5.0,
    retries: int = 2,
    backoff: float = 0.5,
) -> Dict[str, Any]:
    full_url = build_url(url, params)
    last_err: Optional[Exception] = None
    for attempt in range(retries + 1):
        try:
            with urllib.request.urlopen(full_url, timeout=timeout) as resp:  # nosec B310
                data = resp.read()
                return json.loads(data.decode("utf-8"))
        except urllib.error.HTTPError as e:
            if 400 <= e.code < 500:
                raise HttpError(f"HTTP {e.code} for {url}", status=e.code) from e
            last_err = e
        except (OSError, http.client.HTTPException, ValueError) as e:  # ValueError for JSON decode
            last_err = e
        if attempt == retries:
            break
        logger.debug("retrying %s after error: %s", url, last_err)
        time.sleep(backoff * (2**attempt))
    status = getattr(last_err, "code", None)
    raise HttpError(f"Failed to fetch JSON from {url}: {last_err}", status=status)
