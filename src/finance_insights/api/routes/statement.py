import asyncio
from typing import Annotated

from fastapi import APIRouter, Depends

from finance_insights.api.dependencies import get_engine
from finance_insights.api.schemas import StatementRequest
from finance_insights.engine import FinanceEngine
from finance_insights.models import FinancialStatement
from finance_insights.statement.periods import DateRangePreset, get_date_range_presets

router = APIRouter()


@router.post("/statement", response_model=FinancialStatement)
async def statement(
    req: StatementRequest,
    engine: Annotated[FinanceEngine, Depends(get_engine)],
) -> FinancialStatement:
    return await asyncio.to_thread(
        engine.build_statement,
        req.transactions,
        req.accounts,
        req.start_month,
        req.end_month,
        req.preset_months,
    )


@router.get("/statement/presets")
async def statement_presets() -> list[dict[str, str | int]]:
    presets: list[DateRangePreset] = get_date_range_presets()
    return [{"label": preset.label, "months": preset.months} for preset in presets]
