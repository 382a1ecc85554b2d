"""Static crisis resources shown by clients when a crisis reply is returned."""

from typing import Any

from fastapi import APIRouter

from mindfulspace.safety import CRISIS_MESSAGE, CRISIS_RESOURCES

router = APIRouter()


@router.get("")
async def list_crisis_resources() -> dict[str, Any]:
    return {
        "message": CRISIS_MESSAGE,
        "resources": list(CRISIS_RESOURCES),
    }
