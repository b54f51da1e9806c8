from fastapi import APIRouter
from fastapi.responses import JSONResponse

from kosmos.db import db_ping

router = APIRouter(tags=["health"])

@router.get("/health")
def health() -> dict:
    return {"status": "ok"}

# readiness check, 503 when the db is unreachable
@router.get("/ready")
def ready():
    ok = db_ping()
    body = {"status": "ok" if ok else "unready", "checks": {"db": ok}}
    return JSONResponse(status_code=200 if ok else 503, content=body)
