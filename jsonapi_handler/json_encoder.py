# JSON encoding of the handler responses
#
# - Response, Single, Many: the jsonapi document (jsonapi_formatting.py)
# - primary and related instances: {"id", "type", "attributes"}
# - Error, JsonapiError, ErrorCode: error objects and numeric codes
# - dates, sets, uuids, decimals and bytes
#
import datetime
import decimal
import json
from typing import Any
from uuid import UUID
from flask.json.provider import DefaultJSONProvider
import jsonapi_handler
from .config import is_debug
from .errors import Error, ErrorCode, JsonapiError
from .jsonapi_formatting import jsonapi_encode, jsonapi_format_response
from .response import Response
from .result import Many, Single


def encode_value(obj: Any) -> Any:
    """
    Encode the common python types json doesn't support
    :param obj: value
    :return: json serializable value, NotImplemented if obj isn't one of the supported types
    """
    if isinstance(obj, datetime.datetime):
        return obj.isoformat(" ")
    if isinstance(obj, (datetime.date, datetime.time)):
        return obj.isoformat()
    if isinstance(obj, datetime.timedelta):
        return str(obj)
    if isinstance(obj, (set, frozenset)):
        return list(obj)
    if isinstance(obj, UUID):
        return str(obj)
    if isinstance(obj, decimal.Decimal):
        return float(obj)
    if isinstance(obj, bytes):
        jsonapi_handler.log.debug("Encoding bytes as hex")
        return obj.hex()
    return NotImplemented


class _JsonApiJSONEncoder:
    """
    Shared `default` implementation of the flask provider and the json.JSONEncoder
    """

    # pylint: disable=too-many-return-statements,logging-format-interpolation
    # pylint: disable=arguments-differ,method-hidden
    def default(self, obj: Any, **kwargs: Any) -> Any:
        """
        :param obj: object json can't serialize by itself
        :return: serializable representation of obj
        """
        if obj is None:
            return None
        if isinstance(obj, Response):
            return jsonapi_format_response(obj)
        if isinstance(obj, Many):
            return list(obj)
        if isinstance(obj, Single):
            return obj.entity
        if isinstance(obj, (Error, JsonapiError)):
            return obj.to_dict()
        if isinstance(obj, ErrorCode):
            return obj.value

        value = encode_value(obj)
        if value is not NotImplemented:
            return value

        if hasattr(obj, "id") or hasattr(obj, "to_dict"):
            # primary or related instance
            return jsonapi_encode(obj)

        jsonapi_handler.log.warning(f'JSON encoding: unsupported type "{type(obj).__name__}"')
        if is_debug():
            return str(obj)
        return {"error": f"Can't encode {type(obj).__name__}"}


class JsonApiJSONProvider(_JsonApiJSONEncoder, DefaultJSONProvider):
    """
    Flask json provider, set on the app by JsonApi.init_app
    """

    mimetype = "application/vnd.api+json"
    sort_keys = False


class JsonApiJSONEncoder(_JsonApiJSONEncoder, json.JSONEncoder):
    """
    json.dumps(document, cls=JsonApiJSONEncoder)
    """
