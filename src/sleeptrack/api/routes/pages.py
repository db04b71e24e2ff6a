"""Human-facing HTML page."""
from datetime import datetime

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from sleeptrack.analysis.nightly import summarize_last_night
from sleeptrack.api.routes.sleep import cache_control, get_now
from sleeptrack.config import get_settings
from sleeptrack.db.engine import get_store
from sleeptrack.store.sample_store import SampleStore
from sleeptrack.web.pages import render_home_page

router = APIRouter()


@router.get("/", response_class=HTMLResponse)
def home(
    store: SampleStore = Depends(get_store),
    now: datetime = Depends(get_now),
):
    """Last night's sleep at a glance."""
    settings = get_settings()
    summary = summarize_last_night(
        store,
        now,
        cutoff_utc_hour=settings.window_cutoff_utc_hour,
        interruption_threshold_minutes=settings.interruption_threshold_minutes,
    )
    html = render_home_page(summary, settings.owner_name, settings.local_timezone)
    return HTMLResponse(html, headers={"Cache-Control": cache_control(now)})
