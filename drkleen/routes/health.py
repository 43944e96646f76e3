# drkleen/routes/health.py
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from drkleen.database import RowStore, get_store

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=dict)
async def health_check(store: RowStore = Depends(get_store)):
    store_ok = await store.ping()
    return {
        "status": "healthy" if store_ok else "degraded",
        "store": "connected" if store_ok else "unreachable",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
