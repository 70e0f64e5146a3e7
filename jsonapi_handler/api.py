# flask_restful Api subclass exposing the handlers
#
# HandlerApi.expose_handler(PostHandler, "/posts") creates the endpoints
# - /posts
# - /posts/<string:object_id>
# every http method is routed to the handler, methods the handler doesn't implement are
# answered with 405 Method Not Allowed.
#
# pylint: disable=logging-format-interpolation
#
from collections import OrderedDict
from functools import wraps
from http import HTTPStatus
from typing import Any, Callable, Optional, Type
from werkzeug.exceptions import HTTPException
from flask import Flask, jsonify, request
from flask_restful import Api, Resource, abort
from flask_restful.representations.json import output_json
import jsonapi_handler
from .config import is_debug
from .errors import JsonapiError, MethodNotAllowedError
from .handler import Handler
from .jsonapi_formatting import jsonapi_format_response
from .jsonapi_init import JsonApi
from .request import HttpMethod, Request

HTTP_METHODS = [method.value for method in HttpMethod]
DEFAULT_REPRESENTATIONS = [("application/vnd.api+json", output_json)]


class HandlerResource(Resource):
    """
    Flask webservice wrapper for a Handler subclass (cls.handler_class)
    """

    # handler_class: the Handler subclass that fulfills the requests
    handler_class: Type[Handler] = None
    # object_id: name of the url path parameter holding the id, e.g. /posts/<string:object_id>
    object_id = "object_id"
    # db: flask_sqlalchemy extension, the session is committed after each request
    db = None

    def get(self, **kwargs):
        """
        HTTP GET
        """
        return self.fulfill(**kwargs)

    def post(self, **kwargs):
        """
        HTTP POST
        """
        return self.fulfill(**kwargs)

    def patch(self, **kwargs):
        """
        HTTP PATCH
        """
        return self.fulfill(**kwargs)

    def put(self, **kwargs):
        """
        HTTP PUT
        """
        return self.fulfill(**kwargs)

    def delete(self, **kwargs):
        """
        HTTP DELETE
        """
        return self.fulfill(**kwargs)

    def fulfill(self, **kwargs):
        """
        Create the Request, let the handler fulfill it and format the response
        """
        if not self.handler_class.supports_method(request.method):
            raise MethodNotAllowedError(
                f"{request.method} not supported by {self.handler_class.collection_name}", api_code=HTTPStatus.METHOD_NOT_ALLOWED.value
            )

        jsonapi_request = Request.from_flask(request, object_id=kwargs.get(self.object_id))
        response = self.handler_class(jsonapi_request).fulfill_request()
        result = jsonify(jsonapi_format_response(response))
        result.status_code = response.status_code
        return result


class HandlerApi(Api):
    """
    Subclass of the flask_restful Api class where we add the expose_handler method
    this method creates the api endpoints for a Handler subclass
    """

    def __init__(self, app: Optional[Flask] = None, prefix: str = "", app_db: Any = None, **kwargs: Any) -> None:
        """
        :param app: Flask app
        :param prefix: url prefix
        :param app_db: flask_sqlalchemy extension, defaults to the one registered on the app
        """
        kwargs["default_mediatype"] = "application/vnd.api+json"
        self.app_db = app_db
        super().__init__(app, prefix=prefix, **kwargs)
        self.representations = OrderedDict(DEFAULT_REPRESENTATIONS)

    def init_app(self, app: Flask) -> None:
        JsonApi(app)
        if self.app_db is None:
            self.app_db = app.extensions.get("sqlalchemy")
        super().init_app(app)

    def expose_handler(self, handler_class: Type[Handler], url: Optional[str] = None, object_id: str = "object_id") -> None:
        """This methods creates the API url endpoints for the handler
        :param handler_class: Handler subclass
        :param url: collection url, defaults to /<handler_class.collection_name>
        :param object_id: name of the url id parameter

        creates a class of the form

        @api_decorator
        class Post_API(HandlerResource):
            handler_class = PostHandler

        and adds it as an api resource to /url and /url/<string:object_id>
        """
        collection_name = handler_class.collection_name
        if url is None:
            url = f"/{collection_name}"
        url = url.rstrip("/")
        instance_url = f"{url}/<string:{object_id}>"
        properties = {"handler_class": handler_class, "object_id": object_id, "db": self.app_db}
        api_class = api_decorator(type(f"{collection_name}_API", (HandlerResource,), properties))
        endpoint = f"api.{collection_name}"

        jsonapi_handler.log.info(f"Exposing {collection_name} on {url} and {instance_url}, endpoint: {endpoint}")
        self.add_resource(api_class, url, instance_url, endpoint=endpoint, methods=HTTP_METHODS)

    def expose(self, *handler_classes: Type[Handler], url_prefix: str = "") -> None:
        """
        Expose multiple handlers at once
        """
        for handler_class in handler_classes:
            self.expose_handler(handler_class, f"{url_prefix}/{handler_class.collection_name}")


def api_decorator(cls: Type[HandlerResource]) -> Type[HandlerResource]:
    """Decorator for the API views: add generic exception handling

    :param cls: The class that will be decorated (HandlerResource subclass)
    :return: decorated class
    """
    for method_name in ["get", "post", "patch", "put", "delete"]:
        method = getattr(cls, method_name, None)
        if not method:
            continue
        setattr(cls, method_name, http_method_decorator(method))
    return cls


def http_method_decorator(fun: Callable) -> Callable:
    """Decorator for the http methods
    - commit the database
    - convert all exceptions to a jsonapi errors document

    :param fun:
    :return: wrapped fun
    """

    @wraps(fun)
    def method_wrapper(self, *args, **kwargs):
        """Wrap the method and perform error handling
        :return: result of the wrapped method
        """
        status_code = HTTPStatus.INTERNAL_SERVER_ERROR.value
        message = ""
        errors = None
        try:
            result = fun(self, *args, **kwargs)
            if self.db is not None:
                self.db.session.commit()
            return result

        except JsonapiError as exc:
            if exc.status_code >= HTTPStatus.INTERNAL_SERVER_ERROR:
                jsonapi_handler.log.exception(exc)
            else:
                jsonapi_handler.log.warning(f"{type(exc).__name__}: {exc.detail}")
            status_code = exc.status_code
            errors = exc.to_dict()

        except HTTPException as exc:
            status_code = exc.code
            message = exc.description
            jsonapi_handler.log.error(message)

        except Exception as exc:
            jsonapi_handler.log.exception(exc)
            message = str(exc) if is_debug() else "Logging Disabled"

        if self.db is not None:
            self.db.session.rollback()
        if errors is None:
            errors = dict(title=message, detail=message, code=str(status_code))
        abort(status_code, errors=[errors])

    return method_wrapper
