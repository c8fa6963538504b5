"""Fetch interchange deck payloads from a remote URL."""
from __future__ import annotations

import logging

import httpx

from reigns.data.errors import DataLoadError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


def fetch_deck_payload(url: str, *, client: httpx.Client | None = None, timeout: float = DEFAULT_TIMEOUT) -> object:
    """GET ``url`` and return the decoded JSON body.

    Transport errors, non-2xx statuses and invalid JSON all raise DataLoadError.
    """
    try:
        if client is not None:
            response = client.get(url, timeout=timeout)
        else:
            response = httpx.get(url, timeout=timeout, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise DataLoadError(f"HTTP error! status: {exc.response.status_code}") from exc
    except httpx.HTTPError as exc:
        logger.error("Deck request to %s failed: %s", url, exc)
        raise DataLoadError(f"Unable to reach {url}: {exc}") from exc
    try:
        return response.json()
    except ValueError as exc:
        raise DataLoadError(f"Invalid JSON in response from {url}: {exc}") from exc
