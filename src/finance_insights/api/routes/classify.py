import asyncio
from typing import Annotated

from fastapi import APIRouter, Depends

from finance_insights.api.dependencies import get_engine
from finance_insights.api.schemas import ClassifyResponse, LedgerRequest
from finance_insights.engine import FinanceEngine

router = APIRouter()


@router.post("/classify", response_model=ClassifyResponse)
async def classify_transactions(
    req: LedgerRequest,
    engine: Annotated[FinanceEngine, Depends(get_engine)],
) -> ClassifyResponse:
    classified = await asyncio.to_thread(engine.classify_all, req.transactions, req.accounts)
    return ClassifyResponse(transactions=classified, summary=engine.summary(classified))
