from fastapi import APIRouter
from fastapi.responses import JSONResponse

from nutriplan.storage import db

router = APIRouter()


@router.get("/health")
def health() -> dict:
    return {"status": "ok"}


@router.get("/ready")
def ready() -> JSONResponse:
    """503 until the database answers SELECT 1."""
    ok = db.check_db_connectivity()
    return JSONResponse(status_code=200 if ok else 503, content={"db": "ok" if ok else "error"})
