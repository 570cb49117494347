import logging

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from proptech.config import settings
from proptech.routers import catalogs, properties, reports

structlog.configure(
    wrapper_class=structlog.make_filtering_bound_logger(
        logging.getLevelName(settings.LOG_LEVEL.upper())
    ),
)

app = FastAPI(title="Proptech Backoffice Service")
app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_credentials=True, allow_methods=["*"], allow_headers=["*"])

app.include_router(catalogs.router)
app.include_router(properties.router)
app.include_router(reports.router)

@app.get("/health")
async def root_health():
    return "ok"
