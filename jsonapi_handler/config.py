# Configuration lookup
#
# options are read from app.config first, then from the JsonApi class variables (the defaults,
# see jsonapi_init.py) and finally from the environment
import logging
import os
from typing import Optional, Union
from flask import current_app
import jsonapi_handler


def get_config(option: str) -> Optional[Union[bool, int, str]]:
    """
    :param option: configuration option name, e.g. "RELATED_LIMIT"
    :return: configured value, None if it isn't set anywhere
    """
    try:
        value = current_app.config[option]
    except (KeyError, RuntimeError):
        # RuntimeError: no app context
        value = getattr(jsonapi_handler.JsonApi, option, None)

    if value is None:
        value = os.environ.get(option)

    return value


def get_int_config(option: str) -> int:
    """
    Numeric options, environment values are strings
    """
    return int(get_config(option))


def is_debug() -> bool:
    """
    Debug mode follows the package loglevel: sensitive error details are only
    returned to the client when debug logging is enabled
    """
    return jsonapi_handler.log.getEffectiveLevel() < logging.INFO
