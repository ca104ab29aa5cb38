# app/routers/health.py
import time
from datetime import datetime, timezone
from fastapi import APIRouter

router = APIRouter(tags=["health"])

STARTED_AT = time.monotonic()


@router.get("/")
def root():
    return {
        "message": "Clinic auth API running",
        "version": "1.0.0",
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    }


@router.get("/health")
def health():
    return {"status": "OK", "uptime": round(time.monotonic() - STARTED_AT, 3)}
