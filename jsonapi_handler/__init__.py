# flake8: noqa: F401
#
# jsonapi_handler: JSON:API request handlers
# - Handler: dispatch the request to the handler operation, include the requested relationships
#            and report the non fatal errors
# - HandlerApi: expose the handlers with flask_restful
#
from .jsonapi_init import JsonApi, log
from .errors import (
    Error,
    ErrorCode,
    ErrorKind,
    JsonapiError,
    NotFoundError,
    ValidationError,
    MethodNotAllowedError,
    GenericError,
)
from .request import HttpMethod, Request
from .result import Single, Many, entity_id
from .relations import LoadedRelations, RelationLoader, AttributeRelationLoader, SQLAlchemyRelationLoader
from .linked import get_linked_resources
from .response import Response
from .handler import Handler
from .jsonapi_formatting import jsonapi_format_response
from .json_encoder import JsonApiJSONProvider, JsonApiJSONEncoder
from .api import HandlerApi
from .__about__ import __version__, __description__

__all__ = (
    "__version__",
    "__description__",
    #
    "JsonApi",
    "log",
    # core:
    "Handler",
    "Request",
    "HttpMethod",
    "Response",
    "Single",
    "Many",
    "entity_id",
    # relations:
    "LoadedRelations",
    "RelationLoader",
    "AttributeRelationLoader",
    "SQLAlchemyRelationLoader",
    "get_linked_resources",
    # formatting:
    "jsonapi_format_response",
    "JsonApiJSONProvider",
    "JsonApiJSONEncoder",
    # api:
    "HandlerApi",
    # Errors:
    "Error",
    "ErrorCode",
    "ErrorKind",
    "JsonapiError",
    "NotFoundError",
    "ValidationError",
    "MethodNotAllowedError",
    "GenericError",
)
