import uvicorn

from finance_insights.app import app
from finance_insights.core import settings
from finance_insights.logger import get_logging_config


def run() -> None:
    uvicorn.run(app, host=settings.API_HOST, port=settings.API_PORT, log_config=get_logging_config())


if __name__ == "__main__":
    run()
