import asyncio
import logging
import os
from typing import Dict

import aiohttp

from common.data_source import RawGroup, ScheduleDataSource, UpstreamUnavailable

logger = logging.getLogger(__name__)

YASNO_REGION_ID = os.getenv("YASNO_REGION_ID", "25")
YASNO_DSO_ID = os.getenv("YASNO_DSO_ID", "902")
YASNO_API_URL = os.getenv(
    "YASNO_API_URL",
    "https://app.yasno.ua/api/blackout-service/public/shutdowns"
    f"/regions/{YASNO_REGION_ID}/dsos/{YASNO_DSO_ID}/planned-outages",
)
YASNO_TIMEOUT_SECONDS = float(os.getenv("YASNO_TIMEOUT_SECONDS", "15"))


class YasnoDataSource(ScheduleDataSource):
    """
    Planned outages feed of YASNO. One GET per call, no retries.
    """

    def __init__(self, url: str = YASNO_API_URL, timeout: float = YASNO_TIMEOUT_SECONDS):
        self.url = url
        self.timeout = timeout

    async def get_groups(self) -> Dict[str, RawGroup]:
        logger.info(f"Fetching YASNO schedule from {self.url}")
        timeout = aiohttp.ClientTimeout(total=self.timeout)

        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.get(self.url, headers={"Accept": "application/json"}) as response:
                    response.raise_for_status()
                    # content_type=None: upstream does not always label JSON correctly
                    data = await response.json(content_type=None)

        except aiohttp.ClientResponseError as e:
            logger.error(f"YASNO API returned HTTP {e.status}")
            raise UpstreamUnavailable(f"YASNO API error: HTTP {e.status}") from e

        except aiohttp.ClientError as e:
            logger.error("YASNO connection error during schedule fetch.", exc_info=True)
            raise UpstreamUnavailable("YASNO API connection error") from e

        except asyncio.TimeoutError as e:
            logger.error(f"YASNO API did not answer within {self.timeout}s")
            raise UpstreamUnavailable("YASNO API timeout") from e

        except ValueError as e:
            # json.JSONDecodeError is a ValueError
            logger.error(f"YASNO API returned a non-JSON body: {e}")
            raise UpstreamUnavailable("YASNO API returned invalid JSON") from e

        if not isinstance(data, dict):
            logger.error(f"YASNO API returned {type(data).__name__} instead of an object")
            raise UpstreamUnavailable("YASNO API returned an unexpected payload")

        logger.debug(f"YASNO payload contains {len(data)} groups")
        return data


def get_data_source() -> ScheduleDataSource:
    """Factory to get the configured schedule data source."""
    source_type = os.getenv("DATA_SOURCE_TYPE", "YASNO").upper()

    if source_type != "YASNO":
        logger.warning(f"Unknown DATA_SOURCE_TYPE={source_type}, using YASNO")

    return YasnoDataSource()
