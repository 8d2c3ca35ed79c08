# backend/app/main.py
from fastapi import FastAPI

from backend.app.api.run import router as run_router
from backend.app.api.tone import router as tone_router

app = FastAPI(title="inbox-triage API")
app.include_router(run_router, prefix="/api")
app.include_router(tone_router, prefix="/api")
