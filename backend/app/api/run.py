# backend/app/api/run.py
from typing import Any, Tuple

from fastapi import APIRouter, Depends, HTTPException
from starlette.concurrency import run_in_threadpool

from inbox_triage.app.run import run_once
from inbox_triage.exceptions import InboxUnavailableError
from inbox_triage.sources.base import DealDirectory, InboxSource, RecordStore
from backend.app.deps import get_collaborators, get_settings
from backend.app.status import run_status_store

router = APIRouter()


def _progress_cb(step: str, event: dict[str, Any]) -> None:
    run_status_store.update(state="running", step=step, detail=event.get("detail"))

    result = event.get("result")
    if result:
        run_status_store.push("recent_results", result)

    error = event.get("error")
    if error:
        run_status_store.push("recent_errors", error)

    if "metrics" in event:
        run_status_store.update(metrics=event.get("metrics") or {})


@router.post("/run")
async def run_endpoint(
    collaborators: Tuple[InboxSource, DealDirectory, RecordStore] = Depends(get_collaborators),
) -> dict:
    inbox, directory, store = collaborators
    settings = get_settings()

    run_status_store.reset()
    run_status_store.update(state="running", step="starting", detail="Starting run")

    try:
        # Run blocking inbox processing in a worker thread so FastAPI stays responsive.
        summary = await run_in_threadpool(
            run_once,
            inbox,
            directory,
            store,
            lookback_hours=settings.lookback_hours,
            max_results=settings.max_results,
            progress_cb=_progress_cb,
        )
    except InboxUnavailableError as exc:
        run_status_store.update(state="error", step="error", detail=str(exc))
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    run_status_store.update(
        state="done",
        step="done",
        detail="Run completed",
        summary=summary,
        metrics=summary,
    )
    return {"ok": True, "summary": summary}


@router.get("/run/status")
async def run_status() -> dict:
    return {"ok": True, "status": run_status_store.snapshot()}
