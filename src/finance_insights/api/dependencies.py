from fastapi import HTTPException, Request

from finance_insights.engine import FinanceEngine


def get_engine(request: Request) -> FinanceEngine:
    engine = getattr(request.app.state, "engine", None)
    if not engine:
        raise HTTPException(status_code=500, detail="Engine not initialized")
    return engine
