import logging
import os
import sys
from flask import Flask
from .json_encoder import JsonApiJSONProvider
from .response import JsonApiHTTPResponse

LOGGER_NAME = "jsonapi_handler"
LOG_FORMAT = "[%(asctime)s] %(levelname)s: %(message)s"


class JsonApi:
    """Flask extension: prepares the app to return jsonapi documents from the handlers

    app = Flask(__name__)
    JsonApi(app, RELATED_LIMIT=100)

    The class variables below are the configuration defaults, app.config values take precedence (see config.py)
    """

    DEFAULT_INCLUDED = ""  # include csv used when the request has no include= query arg
    INCLUDE_ALL = "+all"  # include= value requesting every exposed relationship
    RELATED_LIMIT = 250  # max number of related instances loaded per relationship
    BIG_QUERY_THRESHOLD = 1000  # related count above which a warning is logged
    DEFAULT_PAGE_LIMIT = 250
    MAX_PAGE_LIMIT = 100000
    LOGLEVEL = logging.WARNING

    def __init__(self, app: Flask = None, **kwargs) -> None:
        self.app = app
        if app is not None:
            self.init_app(app, **kwargs)

    def init_app(self, app: Flask, **kwargs) -> None:
        """
        Set the jsonapi response class and json provider on the app
        :param app: Flask application
        :param kwargs: configuration overrides, stored in app.config
        """
        if not isinstance(app, Flask):  # pragma: no cover
            raise TypeError(f"Expected a Flask app, got {type(app).__name__}")

        app.response_class = JsonApiHTTPResponse
        app.json = JsonApiJSONProvider(app)
        app.url_map.strict_slashes = False

        if app.config.get("DEBUG", False):
            log.setLevel(logging.DEBUG)

        # overrides are app specific, the class variables stay the process wide defaults
        app.config.update(kwargs)

    @staticmethod
    def init_logging(loglevel: int = logging.WARNING) -> logging.Logger:
        """
        Create the package logger, the records are written to stderr
        where the webserver collects them
        """
        logger = logging.getLogger(LOGGER_NAME)
        if not logger.handlers:
            stream_handler = logging.StreamHandler(sys.stderr)
            stream_handler.setFormatter(logging.Formatter(LOG_FORMAT))
            logger.addHandler(stream_handler)
            logger.setLevel(loglevel)
        return logger


def env_loglevel(default: int = logging.WARNING) -> int:
    """
    :return: loglevel number from the DEBUG environment variable
    """
    value = os.getenv("DEBUG", default)
    try:
        return int(value)
    except ValueError:  # pragma: no cover
        print(f'DEBUG environment variable should be a loglevel number, got "{value}"', file=sys.stderr)
        return logging.INFO


log = JsonApi.init_logging(env_loglevel())
