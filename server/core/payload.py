# server/core/payload.py

from pydantic import BaseModel, ValidationError as PydanticValidationError
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from core.errors import ValidationError


FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


async def read_payload(request: Request):
    """
    Reads a request body sent either as JSON or as an urlencoded form.
    An empty body reads as {}.
    """
    content_type = request.headers.get("content-type", "").split(";")[0].strip().lower()
    if content_type == FORM_CONTENT_TYPE:
        form = await request.form()
        return dict(form)

    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        return await request.json()
    except ValueError:
        raise ValidationError("Invalid request body")


def parse_body(model: type[BaseModel]):
    """Dependency factory validating a JSON or form body into `model`."""

    async def dependency(request: Request):
        payload = await read_payload(request)
        try:
            return model.model_validate(payload)
        except PydanticValidationError as e:
            raise RequestValidationError(e.errors())

    return dependency
