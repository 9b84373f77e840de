import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import Any

from fastapi import FastAPI, Request

from identity_bootstrap.app_shell.config import (
    Settings,
    configure_logging,
    ensure_data_dir,
    validate_bootstrap_rules,
)
from identity_bootstrap.app_shell.context import ServiceContext
from identity_bootstrap.rules.loader import load_rules

logger = logging.getLogger(__name__)


@lru_cache
def get_settings() -> Settings:
    return Settings()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Provision the identity store before serving requests.

    Rules problems and schema failures abort startup. Role or account
    validation failures are only logged.
    """
    settings = get_settings()
    configure_logging(settings.log_level)

    rules = load_rules(settings.rules_path)
    validate_bootstrap_rules(rules)
    logger.info("Rules loaded from %s", settings.rules_path)

    ensure_data_dir(settings)
    await ServiceContext.create(settings, rules).bootstrap()

    app.state.settings = settings
    app.state.rules = rules
    yield


app = FastAPI(
    title="Identity Bootstrap",
    version="0.1.0",
    lifespan=lifespan,
)


@app.get("/health")
async def health_check(request: Request) -> dict[str, Any]:
    # Fresh context per request so concurrent checks never share a connection
    ctx = ServiceContext.create(request.app.state.settings, request.app.state.rules)
    status = await ctx.status()
    return {"status": "ok", "identity": status.as_dict()}
