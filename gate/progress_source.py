"""
Progress Source
Reads the latest ledger from the validator's Horizon root endpoint
"""

import asyncio
import aiohttp
from typing import Optional
from loguru import logger


class HorizonProgressSource:
    """
    Queries Horizon's root document for `history_latest_ledger`

    A fresh HTTP session is opened and closed for every query; nothing
    is cached between calls.
    """

    PROGRESS_FIELD = 'history_latest_ledger'

    def __init__(self, url: str = 'http://localhost:8000', request_timeout: float = 5):
        """
        Initialize Progress Source

        Args:
            url: Horizon root URL
            request_timeout: Per-request timeout in seconds
        """
        self.url = url
        self.request_timeout = request_timeout

    async def fetch_progress(self) -> Optional[int]:
        """
        Read the current ledger

        Returns:
            Latest ledger number, or None when it cannot be read
        """
        try:
            timeout = aiohttp.ClientTimeout(total=self.request_timeout)

            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.get(self.url) as response:
                    if response.status != 200:
                        logger.debug(f"Horizon returned {response.status}")
                        return None

                    payload = await response.json(content_type=None)

        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.debug(f"Horizon unreachable: {e!r}")
            return None
        except ValueError as e:
            logger.debug(f"Horizon returned invalid JSON: {e}")
            return None

        return self._extract_progress(payload)

    def _extract_progress(self, payload) -> Optional[int]:
        if not isinstance(payload, dict):
            logger.debug("Horizon payload is not an object")
            return None

        value = payload.get(self.PROGRESS_FIELD)

        if isinstance(value, bool) or not isinstance(value, int):
            logger.debug(f"{self.PROGRESS_FIELD} missing or not an integer: {value!r}")
            return None

        return value
