"""
Overpass API client

Handles communication with Overpass API including:
- Rate limiting
- Optional retry on timeouts and 429/504
- Error handling
"""

import time
import requests
from typing import Dict, Any, Optional
from loguru import logger

from ...config import get_config, PipelineConfig


class OverpassAPIClient:
    """Client for interacting with Overpass API"""

    def __init__(self, config: Optional[PipelineConfig] = None):
        self.config = config or get_config()
        self.overpass_url = self.config.api.overpass_url
        self.timeout = self.config.api.request_timeout
        self._last_request_time = 0
        self._min_request_interval = 1.0

    def _rate_limit(self):
        """Ensure we don't exceed rate limits"""
        elapsed = time.time() - self._last_request_time
        if elapsed < self._min_request_interval:
            time.sleep(self._min_request_interval - elapsed)
        self._last_request_time = time.time()

    def query(self, query: str) -> Dict[str, Any]:
        """
        Execute Overpass API query

        Args:
            query: Overpass QL query string

        Returns:
            JSON response from Overpass API

        Raises:
            RuntimeError: If the query fails (after all configured attempts)
        """
        self._rate_limit()

        headers = {
            "User-Agent": self.config.api.user_agent,
            "Content-Type": "application/x-www-form-urlencoded;charset=UTF-8"
        }
        max_retries = self.config.api.max_retries
        retry_delay = self.config.api.retry_delay

        for attempt in range(max_retries):
            last_attempt = attempt == max_retries - 1
            try:
                response = requests.post(
                    self.overpass_url,
                    data={"data": query},
                    headers=headers,
                    timeout=self.timeout
                )
                response.raise_for_status()
                data = response.json()
                if not isinstance(data, dict):
                    raise ValueError(f"expected a JSON object, got {type(data).__name__}")
                return data
            except requests.exceptions.Timeout as e:
                if last_attempt:
                    logger.error(f"Overpass timeout after {max_retries} attempt(s)")
                    raise RuntimeError(f"Overpass API timeout after {max_retries} attempt(s)") from e
                wait_time = retry_delay * (attempt + 1)
                logger.warning(f"Overpass timeout (attempt {attempt + 1}/{max_retries}). Retrying in {wait_time}s...")
                time.sleep(wait_time)
            except requests.exceptions.HTTPError as e:
                status = e.response.status_code if e.response is not None else "?"
                if status in [429, 504] and not last_attempt:
                    wait_time = retry_delay * (attempt + 1)
                    logger.warning(f"Overpass {status} (attempt {attempt + 1}/{max_retries}). Retrying in {wait_time}s...")
                    time.sleep(wait_time)
                else:
                    logger.error(f"Overpass error: HTTP {status}")
                    raise RuntimeError(f"Overpass error: {status}") from e
            except requests.exceptions.RequestException as e:
                if last_attempt:
                    logger.error(f"Overpass request failed: {e}")
                    raise RuntimeError(f"Overpass API request failed: {e}") from e
                logger.warning(f"Overpass request failed (attempt {attempt + 1}): {e}")
                time.sleep(retry_delay * (attempt + 1))
            except ValueError as e:
                logger.error(f"Overpass returned invalid JSON: {e}")
                raise RuntimeError("Overpass API returned invalid JSON") from e

        return {"elements": []}
