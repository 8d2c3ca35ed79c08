# backend/app/api/tone.py
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool

from inbox_triage.tone.scorer import ToneScorer
from backend.app.deps import get_tone_scorer

router = APIRouter(prefix="/tone")

NO_GUIDE = "Tone guide is not available"


class ToneScoreRequest(BaseModel):
    body: str
    recipient_type: str = "default"


@router.post("/score")
async def score_tone(req: ToneScoreRequest, scorer: ToneScorer = Depends(get_tone_scorer)) -> dict:
    # The first call may hit the sheet; keep it off the event loop.
    result = await run_in_threadpool(scorer.score_tone, req.body, req.recipient_type)
    if result is None:
        raise HTTPException(status_code=503, detail=NO_GUIDE)
    return {"ok": True, "result": result.to_dict()}


@router.get("/context")
async def tone_context(
    recipient_type: str = "default",
    deal_stage: str = "default",
    urgency: str = "normal",
    scorer: ToneScorer = Depends(get_tone_scorer),
) -> dict:
    context = await run_in_threadpool(scorer.get_tone_for_context, recipient_type, deal_stage, urgency)
    if context is None:
        raise HTTPException(status_code=503, detail=NO_GUIDE)
    return {"ok": True, "context": context.to_dict()}
