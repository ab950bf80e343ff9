import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Header, Query, status
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel

from common.data_source import UpstreamUnavailable
from common.fallback import InMemoryFallbackStore
from common.formatting import MSG_FETCH_ERROR
from common.log_context import reset_group_context, set_group_context
from common.logging_config import setup_logging
from common.query_service import build_query_result
from common.time_utils import now_minute_of_day
from security_middleware import SecurityMiddleware
from yasno.data_source import get_data_source

DEFAULT_GROUP = os.getenv("DEFAULT_GROUP", "5.2")
DEFAULT_MODE = os.getenv("DEFAULT_MODE", "schedule")
CACHE_TTL_SECONDS = int(os.getenv("CACHE_TTL_SECONDS", "300"))
FALLBACK_MAX_AGE_SECONDS = os.getenv("FALLBACK_MAX_AGE_SECONDS")
LOG_DIR = os.getenv("LOG_DIR")

logger = logging.getLogger(__name__)

data_source = get_data_source()
# Per-process hint only: lost on restart, not shared between instances
fallback_store = InMemoryFallbackStore(
    max_age_seconds=float(FALLBACK_MAX_AGE_SECONDS) if FALLBACK_MAX_AGE_SECONDS else None
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging("", log_dir=LOG_DIR)
    logger.info(f"Schedule API started, default group {DEFAULT_GROUP}")
    yield


app = FastAPI(title="Outage Schedule API", version="1.0.0", lifespan=lifespan)

app.add_middleware(SecurityMiddleware)


# --- Pydantic Models ---
class ScheduleAnswer(BaseModel):
    text: str


def _error_response() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ScheduleAnswer(text=MSG_FETCH_ERROR).model_dump(),
    )


# --- Endpoints ---

@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "healthy", "service": "Outage Schedule API"}


@app.get(
    "/api/yasno",
    response_model=ScheduleAnswer,
    responses={304: {"description": "Not modified"}, 500: {"model": ScheduleAnswer}},
)
async def get_schedule_answer(
    mode: Optional[str] = Query(None, description="schedule, schedule_tomorrow, next, until_on, off_at"),
    group: Optional[str] = Query(None, description="Група, напр. 5.2"),
    if_none_match: Optional[str] = Header(None),
):
    mode = mode or DEFAULT_MODE
    group_id = group or DEFAULT_GROUP
    token = set_group_context(group_id)
    logger.info(f"API Request: mode={mode}, group={group_id}")

    try:
        payload = await data_source.get_groups()
        result = build_query_result(
            payload,
            group_id,
            mode,
            store=fallback_store,
            now_minute=now_minute_of_day(),
            if_none_match=if_none_match,
        )
    except UpstreamUnavailable as e:
        logger.error(f"Upstream unavailable: {e}")
        return _error_response()
    except Exception as e:
        logger.error(f"Error processing request: {e}", exc_info=True)
        return _error_response()
    finally:
        reset_group_context(token)

    if result.not_modified:
        return Response(status_code=status.HTTP_304_NOT_MODIFIED, headers={"ETag": result.etag})

    if not result.cacheable:
        return JSONResponse(content=ScheduleAnswer(text=result.text).model_dump(), headers={"Cache-Control": "no-cache"})

    return JSONResponse(
        content=ScheduleAnswer(text=result.text).model_dump(),
        headers={
            "ETag": result.etag,
            "Cache-Control": f"public, max-age={CACHE_TTL_SECONDS}",
        },
    )


if __name__ == "__main__":
    uvicorn.run("api:app", host="0.0.0.0", port=8000)
