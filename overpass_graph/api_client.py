"""
Overpass API client

Handles communication with Overpass API including:
- Limiting simultaneous requests per client
- Error handling
- Decoding responses into a linked Result
"""

import threading
from dataclasses import replace
from typing import Any, Optional

import requests
from loguru import logger

from .config import get_config, validate_config
from .exceptions import ServerError, TransportError
from .models import Result
from .parser import decode


class Client:
    """
    Client for interacting with Overpass API

    At most max_parallel requests run at the same time; further callers
    block until a running request finishes. Failed requests are not
    retried.
    """

    def __init__(
        self,
        api_endpoint: Optional[str] = None,
        max_parallel: Optional[int] = None,
        session: Optional[Any] = None,
        timeout: Optional[float] = None
    ):
        config = get_config()
        api = replace(
            config.api,
            overpass_url=api_endpoint or config.api.overpass_url,
            timeout=timeout if timeout is not None else config.api.timeout,
        )
        self.config = replace(
            config,
            max_parallel=max_parallel if max_parallel is not None else config.max_parallel,
            api=api,
        )
        validate_config(self.config)

        self.api_endpoint = self.config.api.overpass_url
        self.timeout = self.config.api.timeout
        self.session = session if session is not None else requests.Session()
        self._semaphore = threading.BoundedSemaphore(self.config.max_parallel)

    def query(self, query: str) -> Result:
        """
        Execute Overpass API query

        Use [out:json] in the query to get the JSON encoding; anything
        else is decoded as XML.

        Args:
            query: Overpass QL query string

        Returns:
            Decoded Result

        Raises:
            TransportError: If the request or reading its body fails
            ServerError: If the server does not answer 200
            DecodeError: If the body is not a valid response
        """
        body = self._post(query)
        return self.decode(body, query)

    def decode(self, body: bytes, query: str = "") -> Result:
        """Decode a response body obtained elsewhere, e.g. from a cache"""
        return decode(body, query)

    def _post(self, query: str) -> bytes:
        headers = {
            "User-Agent": self.config.api.user_agent,
            "Content-Type": "application/x-www-form-urlencoded"
        }

        with self._semaphore:
            logger.info(f"Posting Overpass query to {self.api_endpoint}")
            try:
                response = self.session.post(
                    self.api_endpoint,
                    data={"data": query},
                    headers=headers,
                    timeout=self.timeout
                )
            except requests.exceptions.RequestException as e:
                logger.error(f"Overpass request failed: {e}")
                raise TransportError(e) from e

            try:
                body = response.content
            except requests.exceptions.RequestException as e:
                logger.error(f"Failed to read Overpass response: {e}")
                raise TransportError(e) from e

            if response.status_code != 200:
                logger.warning(f"Overpass returned HTTP {response.status_code} {response.reason}")
                raise ServerError(response.status_code, response.reason or "", body)

        logger.debug(f"Received {len(body)} bytes from Overpass")
        return body


DEFAULT_CLIENT = Client()


def query(query: str) -> Result:
    """Run query with the default client"""
    return DEFAULT_CLIENT.query(query)
