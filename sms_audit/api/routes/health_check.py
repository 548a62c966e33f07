from datetime import UTC, datetime

from fastapi import APIRouter, status

router = APIRouter()


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    return {"status": "OK", "timestamp": datetime.now(UTC).isoformat()}
