# Response classes:
# - Response: the result of a handler, consumed by the serializer
# - JsonApiHTTPResponse: flask response class
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any, Dict, List
from flask import Response as FlaskResponse
from .errors import Error


@dataclass(frozen=True)
class Response:
    """
    Handler response:
    - data: the primary result (Single or Many), this is the instance fetched by the handler, not a copy
    - linked: relationship name -> related instances
    - errors: non fatal errors
    """

    data: Any
    linked: Dict[str, List[Any]] = field(default_factory=dict)
    errors: List[Error] = field(default_factory=list)
    status_code: int = HTTPStatus.OK.value
    meta: Dict[str, Any] = field(default_factory=dict)


class JsonApiHTTPResponse(FlaskResponse):
    """
    Flask response class
    """

    default_mimetype = "application/vnd.api+json"
