import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from app.core.config import settings
from app.core.db_check import wait_for_db
from app.core.exceptions import SettlementConsistencyError
from app.core.log_config import configure_logging
from app.db.session import create_tables
from app.api.v1.routes.system import router as system_router
from app.api.v1.routes.group import router as group_router, member_router
from app.api.v1.routes.expense import router as expense_router, group_expense_router
from app.api.v1.routes.settlement import router as settlement_router

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    await wait_for_db(settings.DB_CONNECT_RETRIES)
    await create_tables()
    yield

app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(SettlementConsistencyError)
async def settlement_consistency_handler(request: Request, exc: SettlementConsistencyError):
    logger.error(f"Settlement consistency error on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={"detail": f"Settlement consistency error: {exc}"},
    )

@app.get("/")
async def root():
    return {"message": "Splitter Backend is live"}

app.include_router(system_router, prefix="/api/v1/system")
app.include_router(group_router, prefix="/api/v1/groups")
app.include_router(group_expense_router, prefix="/api/v1/groups")
app.include_router(settlement_router, prefix="/api/v1/groups")
app.include_router(member_router, prefix="/api/v1/members")
app.include_router(expense_router, prefix="/api/v1/expenses")
