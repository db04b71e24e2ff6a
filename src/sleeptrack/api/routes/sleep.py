"""Sample ingest and nightly summary routes."""
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from sleeptrack.analysis.expiry import seconds_until_expiry
from sleeptrack.analysis.nightly import summarize_last_night
from sleeptrack.config import get_settings
from sleeptrack.db.engine import get_store
from sleeptrack.ingest.validation import SampleValidationError, validate_sample
from sleeptrack.store.sample_store import SampleStore

logger = logging.getLogger(__name__)

router = APIRouter()


def get_now() -> datetime:
    """Current instant; overridden in tests."""
    return datetime.now(timezone.utc)


def cache_control(now: datetime) -> str:
    settings = get_settings()
    max_age = seconds_until_expiry(
        now,
        tz_name=settings.local_timezone,
        hour=settings.cache_expiry_hour,
        minute=settings.cache_expiry_minute,
    )
    logger.debug("Summary cacheable for %d seconds", max_age)
    return f"public, max-age={max_age}"


@router.post("/samples")
async def ingest_sample(request: Request, store: SampleStore = Depends(get_store)):
    """
    Upsert one sleep-stage sample (called from the Health export Shortcut).
    Malformed payloads get an empty 400 and never touch the store.
    """
    try:
        payload = await request.json()
    except ValueError:
        logger.info("Rejected sample: body is not JSON")
        return Response(status_code=400)

    try:
        sample = validate_sample(payload)
    except SampleValidationError as exc:
        logger.info("Rejected sample: %s", exc)
        return Response(status_code=400)

    await run_in_threadpool(store.put, sample)
    return {"status": "ok"}


@router.get("/sleep")
def last_night(
    store: SampleStore = Depends(get_store),
    now: datetime = Depends(get_now),
):
    """Return last night's summary, or 404 when nothing was tracked."""
    settings = get_settings()
    summary = summarize_last_night(
        store,
        now,
        cutoff_utc_hour=settings.window_cutoff_utc_hour,
        interruption_threshold_minutes=settings.interruption_threshold_minutes,
    )
    if summary is None:
        return Response(status_code=404)

    return JSONResponse(
        summary.to_dict(),
        headers={"Cache-Control": cache_control(now)},
    )
