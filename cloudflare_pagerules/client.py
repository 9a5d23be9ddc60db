"""
HTTP transport for the Cloudflare API.
"""

import logging
from typing import Any, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from . import __version__
from .config import APIConfig

logger = logging.getLogger("cloudflare_pagerules")


class CloudflareClient:
    """Authenticated session against the Cloudflare v4 API."""

    def __init__(self, config: APIConfig):
        """Initialize the Cloudflare API client."""
        self.config = config
        self.base_url = config.api_url.rstrip("/")

        self.session = requests.Session()

        # Only idempotent reads are retried; writes fail on the first error
        retry_strategy = Retry(
            total=config.max_retries,
            backoff_factor=1,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["GET"]
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

        self.session.headers.update({
            "Accept": "application/json",
            "Content-Type": "application/json",
            "User-Agent": f"cloudflare-pagerules/{__version__}"
        })
        if config.api_token:
            self.session.headers["Authorization"] = f"Bearer {config.api_token}"
        else:
            self.session.headers.update({
                "X-Auth-Email": config.api_email,
                "X-Auth-Key": config.api_key,
            })

    def make_request(self, method: str, path: str, body: Optional[Any] = None) -> bytes:
        """
        Perform one API call and return the raw response body.

        Args:
            method: HTTP method, e.g. "GET" or "POST"
            path: API path below the base URL, e.g. "/zones/abc/pagerules"
            body: Optional JSON-serializable request body

        Returns:
            The response body bytes

        Raises:
            requests.exceptions.RequestException: If the request could not be
                completed or the API answered with a non-2xx status
        """
        url = f"{self.base_url}{path}"
        logger.debug(f"{method} {url}")

        try:
            response = self.session.request(
                method,
                url,
                json=body,
                timeout=self.config.timeout,
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            logger.error(f"API request failed: {method} {url}: {e}")
            if getattr(e, "response", None) is not None:
                logger.error(f"Response text: {e.response.text}")
            raise

        logger.debug(f"Response status: {response.status_code}")
        return response.content
