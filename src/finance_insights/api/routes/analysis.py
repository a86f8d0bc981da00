import asyncio
from typing import Annotated

from fastapi import APIRouter, Depends

from finance_insights.api.dependencies import get_engine
from finance_insights.api.schemas import BalanceSheetRequest, LedgerRequest, TransactionsRequest
from finance_insights.engine import FinanceEngine
from finance_insights.models import BalanceSheet, FinanceReport, FinancialSnapshot

router = APIRouter()


@router.post("/snapshot", response_model=FinancialSnapshot)
async def snapshot(
    req: TransactionsRequest,
    engine: Annotated[FinanceEngine, Depends(get_engine)],
) -> FinancialSnapshot:
    return await asyncio.to_thread(engine.analyze, req.transactions)


@router.post("/metrics", response_model=FinanceReport)
async def metrics(
    req: LedgerRequest,
    engine: Annotated[FinanceEngine, Depends(get_engine)],
) -> FinanceReport:
    return await asyncio.to_thread(engine.report, req.transactions, req.accounts)


@router.post("/balance-sheet", response_model=BalanceSheet)
async def balance_sheet(
    req: BalanceSheetRequest,
    engine: Annotated[FinanceEngine, Depends(get_engine)],
) -> BalanceSheet:
    return engine.balance_sheet(req.accounts)
