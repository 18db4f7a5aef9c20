#!/usr/bin/env python3
"""
Mirror Fetcher Module
Downloads the read-only tweets.json mirror from a static host.
"""

import time
import logging
from typing import Any, Dict, Optional
import requests
from requests import Session
from dotenv import load_dotenv
from data_parser import parse_mirror_document
from errors import ValidationError

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class MirrorFetcher:
    """Fetches the mirror document with retries on rate limits and timeouts."""

    def __init__(self, session: Session, url: str, max_retries: int = 3):
        self.session = session
        self.url = url
        self.max_retries = max_retries
        self.timeout = 30
        self.retry_delay = 2.0  # Base delay in seconds
        self.rate_limit_backoff = 2.0  # Multiplier for rate limit retries
        self.last_error: Optional[str] = None

    def fetch_document(self, attempt: int = 0) -> Optional[Any]:
        """
        Fetch and decode the mirror JSON.

        Args:
            attempt: Retry counter, callers leave it at 0

        Returns:
            Decoded JSON or None if failed (reason in ``last_error``)
        """
        try:
            response = self.session.get(
                self.url,
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )

            if response.status_code == 200:
                self.last_error = None
                data = response.json()
                logger.debug(f"Fetched mirror document from {self.url}")
                return data

            elif response.status_code == 429 and attempt < self.max_retries:
                retry_delay = self.retry_delay * self.rate_limit_backoff
                logger.warning(f"Rate limit exceeded. Waiting {retry_delay} seconds...")
                time.sleep(retry_delay)
                self.rate_limit_backoff = min(self.rate_limit_backoff * 1.5, 10.0)
                return self.fetch_document(attempt + 1)

            else:
                self.last_error = f"HTTP {response.status_code}: {response.reason}"
                logger.error(f"Mirror request failed: {self.last_error}")
                return None

        except requests.exceptions.Timeout:
            if attempt < self.max_retries:
                logger.error("Request timeout. Retrying...")
                time.sleep(self.retry_delay)
                return self.fetch_document(attempt + 1)
            self.last_error = "Request timed out"
            logger.error(f"Giving up on {self.url} after {attempt + 1} attempts")
            return None

        except ValueError as e:
            self.last_error = "Invalid JSON response"
            logger.error(f"Invalid JSON response: {e}")
            return None

        except requests.exceptions.RequestException as e:
            self.last_error = f"Network error: {e}"
            logger.error(f"Network error during mirror request: {e}")
            return None

    def list_all(self) -> Dict[str, Any]:
        """Same result shape as LibraryStore.list_all, plus an error message."""
        data = self.fetch_document()
        if data is None:
            return {"success": False, "error": self.last_error}
        try:
            tweets = parse_mirror_document(data)
        except ValidationError as e:
            return {"success": False, "error": str(e)}
        logger.info(f"Loaded {len(tweets)} tweets from mirror")
        return {"success": True, "tweets": tweets}


def create_mirror_fetcher(url: Optional[str]) -> Optional[MirrorFetcher]:
    """
    Create a fetcher with a fresh requests session.

    Returns:
        MirrorFetcher instance or None when no URL is configured
    """
    if not url:
        logger.error("No mirror URL configured")
        return None
    return MirrorFetcher(session=requests.Session(), url=url)
