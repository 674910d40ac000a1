"""
Minimal API Entrypoint for logpair
Exposes endpoints for the raw text → records → transactions pipeline.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from logpair import __version__
from logpair.analysis import LogAnalysisSession
from logpair.common.config import get_config
from logpair.common.logging_setup import configure_logging
from logpair.common.types import LogRecord, LogStats, Transaction, TransactionStats
from logpair.ingestion import extract_json_payload

logger = logging.getLogger(__name__)


# Lifespan manager for startup/shutdown
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    config = get_config()
    configure_logging(config.log_level)
    app.state.config = config

    logger.info("[API] logpair ready (match window %.1fs)", config.match_window_seconds)

    yield

    logger.info("[API] Shutdown complete")


# Create FastAPI app
app = FastAPI(
    title="logpair API",
    description="Raw logs → LogRecords → request/response Transactions",
    version=__version__,
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# REQUEST/RESPONSE MODELS
# =============================================================================

class AnalyzeRequest(BaseModel):
    """Request body for /logs/analyze"""
    raw_logs: str
    level: str = "all"
    search: str = ""
    tag: str = "all"
    page: int = 1
    page_size: Optional[int] = Field(default=None, ge=1)
    include_payloads: bool = False


class RecordView(BaseModel):
    record: LogRecord
    payload: Optional[Any] = None


class AnalyzeResponse(BaseModel):
    """Response body for /logs/analyze"""
    records: List[RecordView]
    page: int
    total_pages: int
    total_matched: int
    tags: List[str]
    stats: LogStats


class TransactionsRequest(BaseModel):
    """Request body for /logs/transactions"""
    raw_logs: str
    search: str = ""
    page: int = 1
    page_size: Optional[int] = Field(default=None, ge=1)


class TransactionsResponse(BaseModel):
    """Response body for /logs/transactions"""
    transactions: List[Transaction]
    page: int
    total_pages: int
    total_matched: int
    stats: TransactionStats


# =============================================================================
# ENDPOINTS
# =============================================================================

@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": "logpair",
        "timestamp": datetime.now().isoformat()
    }


@app.post("/logs/analyze", response_model=AnalyzeResponse)
async def analyze_logs(request: AnalyzeRequest):
    """
    Parse raw logs and return one filtered page of records.

    Flow:
    1. Parse each line (timestamp, level, tag)
    2. Filter by level AND (search OR tag)
    3. Paginate
    """
    session = LogAnalysisSession(config=app.state.config)
    session.analyze(request.raw_logs)

    try:
        page = session.query_records(
            level=request.level,
            search=request.search,
            tag=request.tag,
            page=request.page,
            page_size=request.page_size
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    views = [
        RecordView(
            record=record,
            payload=extract_json_payload(record.message) if request.include_payloads else None
        )
        for record in page.items
    ]

    return AnalyzeResponse(
        records=views,
        page=page.page,
        total_pages=page.total_pages,
        total_matched=page.total_items,
        tags=session.tags,
        stats=session.stats()
    )


@app.post("/logs/transactions", response_model=TransactionsResponse)
async def correlate_transactions(request: TransactionsRequest):
    """
    Parse raw logs and pair requests with responses.
    Transactions are returned newest first.
    """
    session = LogAnalysisSession(config=app.state.config)
    session.analyze(request.raw_logs)

    try:
        page = session.query_transactions(
            search=request.search,
            page=request.page,
            page_size=request.page_size
        )
    except Exception as e:
        logger.exception("[API] Correlation failed")
        raise HTTPException(status_code=500, detail=f"Correlation failed: {str(e)}")

    return TransactionsResponse(
        transactions=page.items,
        page=page.page,
        total_pages=page.total_pages,
        total_matched=page.total_items,
        stats=session.transaction_stats()
    )


# =============================================================================
# EXAMPLE ENDPOINT (FOR TESTING)
# =============================================================================

EXAMPLE_LOGS = """2024-05-02 10:15:00.120 OrderService: INFO request{"OrderCode": "SO20240502001", "ShopId": 8812}
2024-05-02 10:15:00.480 CacheService: DEBUG warmup finished
2024-05-02 10:15:01.040 OrderService: INFO response{"OrderCode": "SO20240502001", "Status": "Success"}
2024-05-02 10:15:02.000 ShippingService: INFO request {"ShippingOrderCode": "SH77120", "Weight": 3}
2024-05-02 10:15:03.500 ShippingService: ERROR response {"ShippingOrderCode": "SH77120", "ReturnCode": "API0042"}
2024-05-02 10:15:04.000 PaymentGateway: INFO InputChainData {"Amount": 100}
2024-05-02 10:15:06.250 PaymentGateway: INFO response OutputChainData {"Result": "ok"}"""


@app.get("/logs/example")
async def get_example_logs():
    """
    Return example log text for testing.
    Can be used as raw_logs for /logs/analyze and /logs/transactions.
    """
    return {"raw_logs": EXAMPLE_LOGS}


# =============================================================================
# MAIN
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "logpair.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True
    )
