# server/api/completions.py

import time
import logging
import httpx
from typing import Any
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from config import Settings, get_settings
from core.errors import ConfigurationError, InternalError, ValidationError
from core.payload import read_payload


logger = logging.getLogger(__name__)

router = APIRouter()


async def get_http_client(settings: Settings = Depends(get_settings)):
    async with httpx.AsyncClient(timeout=settings.openai_timeout) as client:
        yield client


def build_payload(message: Any, settings: Settings) -> dict:
    return {
        "model": settings.openai_model,
        "messages": [{"role": "user", "content": message}],
        "max_tokens": settings.openai_max_tokens,
    }


async def read_message(request: Request) -> Any:
    try:
        body = await read_payload(request)
    except ValidationError:
        return None
    return body.get("message") if isinstance(body, dict) else None


@router.post("/completions")
async def create_completion(
    request: Request,
    client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
):
    """
    Forwards the message as a single user turn and relays the upstream JSON as-is.
    The message is passed through untouched; the upstream decides what it accepts.
    """
    if not settings.openai_api_key:
        logger.error("OPENAI_API_KEY is not defined in environment variables")
        raise ConfigurationError("Server configuration error: API key not found")

    message = await read_message(request)

    start = time.perf_counter()
    try:
        response = await client.post(
            settings.openai_api_url,
            json=build_payload(message, settings),
            headers={"Authorization": f"Bearer {settings.openai_api_key}"},
        )
        data = response.json()
    except (httpx.HTTPError, ValueError):
        logger.exception("Completion API error")
        raise InternalError("Failed to get completion")

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info("Completion API response time: %.0fms (status %s)", elapsed_ms, response.status_code)
    return JSONResponse(content=data)
