import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from guildhall.config import settings
from guildhall.core.errors import StoreUnavailableError
from guildhall.store import DocumentStore, get_store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(store: DocumentStore = Depends(get_store)) -> JSONResponse:
    """Unauthenticated liveness probe: identity-provider config and store reachability."""
    auth_status = "ok" if settings.SECRET_KEY else "error"
    try:
        store.ping()
        store_status = "ok"
    except StoreUnavailableError:
        store_status = "error"

    healthy = auth_status == "ok" and store_status == "ok"
    if not healthy:
        logger.warning("Health check failing: auth=%s store=%s", auth_status, store_status)

    return JSONResponse(
        status_code=200 if healthy else 500,
        content={
            "status": "started",
            "firebaseStatus": auth_status,
            "firestoreStatus": store_status,
            "time": datetime.now(timezone.utc).isoformat(),
        },
    )
