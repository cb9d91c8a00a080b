"""
Application handler served by the bootstrap (FastAPI)
-----------------------------------------------------
The handler is opaque to the bootstrap: it only has to be an ASGI app.
No routes are defined here.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware


logger = logging.getLogger("app")


# ---- Lifespan ----
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log application startup and shutdown."""
    logger.info("%s starting up", app.title)
    yield
    logger.info("%s shutting down", app.title)


# ---- App ----
app = FastAPI(title="Server Bootstrap", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

"""
Note: Do not run this module directly. Use `python main.py` from
project root, which resolves PORT and starts the bootstrap.
"""
