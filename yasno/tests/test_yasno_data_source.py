import asyncio

import aiohttp
import pytest
from aioresponses import aioresponses

from common.data_source import UpstreamUnavailable
from yasno.data_source import YasnoDataSource, YASNO_API_URL, get_data_source

TEST_URL = "https://yasno.test/planned-outages"

MOCK_YASNO_RESPONSE = {
    "5.2": {
        "today": {
            "slots": [
                {"start": 0, "end": 120, "type": "NotPlanned"},
                {"start": 120, "end": 180, "type": "Definite"},
            ],
            "date": "2025-10-19T00:00:00+03:00",
            "status": "ScheduleApplies",
        },
        "tomorrow": {"slots": [], "date": "2025-10-20T00:00:00+03:00", "status": "WaitingForSchedule"},
        "updatedOn": "2025-10-19T08:00:00+00:00",
    }
}


@pytest.fixture
def source():
    return YasnoDataSource(url=TEST_URL, timeout=5)


@pytest.mark.asyncio
async def test_successful_fetch(source):
    with aioresponses() as m:
        m.get(TEST_URL, payload=MOCK_YASNO_RESPONSE, status=200)
        data = await source.get_groups()
    assert data == MOCK_YASNO_RESPONSE


@pytest.mark.asyncio
async def test_sends_accept_json(source):
    with aioresponses() as m:
        m.get(TEST_URL, payload={}, status=200)
        await source.get_groups()
        request = next(iter(m.requests.values()))[0]
    assert request.kwargs["headers"]["Accept"] == "application/json"


@pytest.mark.asyncio
async def test_http_error_status(source):
    with aioresponses() as m:
        m.get(TEST_URL, status=503)
        with pytest.raises(UpstreamUnavailable) as excinfo:
            await source.get_groups()
    assert "HTTP 503" in str(excinfo.value)


@pytest.mark.asyncio
async def test_connection_error(source):
    with aioresponses() as m:
        m.get(TEST_URL, exception=aiohttp.ClientConnectionError("Mock connection error"))
        with pytest.raises(UpstreamUnavailable):
            await source.get_groups()


@pytest.mark.asyncio
async def test_timeout(source):
    with aioresponses() as m:
        m.get(TEST_URL, exception=asyncio.TimeoutError())
        with pytest.raises(UpstreamUnavailable) as excinfo:
            await source.get_groups()
    assert "timeout" in str(excinfo.value)


@pytest.mark.asyncio
async def test_non_json_body(source):
    with aioresponses() as m:
        m.get(TEST_URL, body="<html>maintenance</html>", status=200, content_type="text/html")
        with pytest.raises(UpstreamUnavailable):
            await source.get_groups()


@pytest.mark.asyncio
async def test_json_array_is_rejected(source):
    with aioresponses() as m:
        m.get(TEST_URL, payload=[1, 2, 3], status=200)
        with pytest.raises(UpstreamUnavailable):
            await source.get_groups()


def test_factory_defaults_to_yasno(monkeypatch):
    monkeypatch.delenv("DATA_SOURCE_TYPE", raising=False)
    source = get_data_source()
    assert isinstance(source, YasnoDataSource)
    assert source.url == YASNO_API_URL


def test_default_url_points_to_planned_outages():
    assert YASNO_API_URL.endswith("/planned-outages")
