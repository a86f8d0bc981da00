from typing import Annotated

from fastapi import APIRouter, Depends

from finance_insights.api.dependencies import get_engine
from finance_insights.engine import FinanceEngine

router = APIRouter()


@router.get("/health")
async def health(engine: Annotated[FinanceEngine, Depends(get_engine)]) -> dict[str, str]:
    return {"status": "ok"}
