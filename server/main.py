# server/main.py

import logging
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from config import get_settings
from logging_config import configure_logging
from core.errors import register_exception_handlers
from api import auth, completions
from database import init_db


settings = get_settings()
configure_logging(settings.log_level)
settings.require_signing_secret()

init_db()

app = FastAPI(title="promptgate")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(auth.router)
app.include_router(completions.router)


if __name__ == "__main__":
    logging.getLogger(__name__).info("Server starting on port %s", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
