from typing import Type, TypeVar

from pydantic import BaseModel
from quart import request

from .errors import InvalidRequest

M = TypeVar("M", bound=BaseModel)


async def parse_body(schema: Type[M]) -> M:
    data = await request.get_json(force=True, silent=True)
    if not isinstance(data, dict):
        raise InvalidRequest("Request body must be a JSON object")
    return schema.model_validate(data)
