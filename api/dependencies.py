"""FastAPI dependencies for dependency injection."""

import json
from typing import Any, Union

from fastapi import Depends, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError as PydanticValidationError

from api.schemas.jobs import JobCreateRequest
from api.services.jobs import JobService
from database.engine import Database
from database.repositories.jobs import JobStore


def get_database(request: Request) -> Database:
    """Database handle opened by the application lifespan."""
    return request.app.state.database


def get_job_store(database: Database = Depends(get_database)) -> JobStore:
    return JobStore(database.session_factory)


def get_job_service(store: JobStore = Depends(get_job_store)) -> JobService:
    return JobService(store)


FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def _form_value(values: list) -> Union[str, list]:
    """Single form values stay scalar; repeated keys become a list."""
    return values[0] if len(values) == 1 else list(values)


async def get_job_create_payload(request: Request) -> JobCreateRequest:
    """
    Job creation payload from a JSON or form-encoded body.

    An absent or empty body yields an empty payload, so the presence check
    in the service answers with "Something is missing." instead of a
    schema error.

    Raises:
        RequestValidationError: Malformed JSON or values of the wrong shape
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        data: Any = {key: _form_value(form.getlist(key)) for key in form.keys()}
    else:
        body = await request.body()
        try:
            data = json.loads(body) if body.strip() else {}
        except ValueError as exc:
            raise RequestValidationError([{
                "type": "json_invalid",
                "loc": ("body",),
                "msg": f"JSON decode error: {exc}",
            }])
        if not isinstance(data, dict):
            data = {}

    try:
        return JobCreateRequest.model_validate(data)
    except PydanticValidationError as exc:
        raise RequestValidationError(
            [{**error, "loc": ("body", *error["loc"])} for error in exc.errors()],
            body=data,
        )
