import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ledgerbook.app.api.v1.api import api_router
from ledgerbook.app.core.config import settings

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Ledgerbook - Customer Ledger & Reports")

# ─── CORS ─────────────────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE"],
    allow_headers=["Content-Type", "Accept"],
    expose_headers=["Content-Disposition"],
)

app.include_router(api_router)
