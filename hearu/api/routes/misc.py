from fastapi import APIRouter
from ...core.config import settings

router = APIRouter(tags=["misc"])

@router.get("/health")
def health():
    return {"success": True, "message": "ok"}

@router.get("/version")
def version():
    return {"success": True, "message": settings.API_VERSION}
