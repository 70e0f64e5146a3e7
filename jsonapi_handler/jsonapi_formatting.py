# JSON:API response formatting functions:
# - primary data
# - linked resources
# - errors
#
# The instances in the resulting dict are encoded by the JsonApiJSONProvider (json_encoder.py)
#
from typing import Any, Dict
import sqlalchemy
from .response import Response
from .result import Many, Single, entity_id


def jsonapi_format_response(response: Response) -> Dict[str, Any]:
    """
    Create a response dict according to the json:api format
    :param response: handler Response
    :return: jsonapi formatted dictionary
    """
    data = response.data
    if isinstance(data, Many):
        data = list(data)
    elif isinstance(data, Single):
        data = data.entity
    # any other data (e.g. from a prebuilt Response) is passed as-is

    result = dict(data=data, linked=response.linked)
    if response.errors:
        result["errors"] = [error.to_dict() for error in response.errors]
    if response.meta:
        result["meta"] = response.meta
    result["jsonapi"] = dict(version="1.0")

    return result


def jsonapi_type(instance: Any) -> str:
    """
    :return: the jsonapi "type", i.e. the tablename if this is a db model, the classname otherwise
    """
    return getattr(instance, "__tablename__", type(instance).__name__)


def jsonapi_attributes(instance: Any) -> Dict[str, Any]:
    """
    :return: the instance attributes:
    - the result of instance.to_dict() if it's implemented
    - the column values of an sqlalchemy instance
    - the public attributes otherwise
    """
    to_dict = getattr(instance, "to_dict", None)
    if callable(to_dict):
        return to_dict()

    mapper = sqlalchemy.inspect(type(instance), raiseerr=False)
    if mapper is not None:
        return {attr.key: getattr(instance, attr.key) for attr in mapper.column_attrs if attr.key != "id"}

    try:
        attrs = vars(instance)
    except TypeError:
        return {}
    # related instances are serialized in "linked", not as attributes
    return {k: v for k, v in attrs.items() if not k.startswith("_") and k != "id" and isinstance(v, (str, int, float, bool, type(None)))}


def jsonapi_encode(instance: Any) -> Dict[str, Any]:
    """
    :return: the instance as a jsonapi resource object:
    `data = {
            "id": "...",
            "type": "...",
            "attributes": { ... },
            }`
    """
    instance_id = entity_id(instance)
    return dict(
        id=str(instance_id) if instance_id is not None else None,
        type=jsonapi_type(instance),
        attributes=jsonapi_attributes(instance),
    )
