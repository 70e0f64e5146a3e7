# handler.py: implements the Handler base class
#
# A Handler subclass serves one resource type. It implements an operation per supported
# http method (handle_get, handle_post, ...) and declares which relationships it exposes:
#
# class PostHandler(Handler):
#     ERROR_SCOPE = 16
#     exposed_relations = ("author", "comments")
#
#     def handle_get(self, request):
#         return Single(db.session.get(Post, request.id))
#
# response = PostHandler(request).fulfill_request()
#
"""
Handler class customizable attributes and methods, override these to customize the behavior of the handler.

ERROR_SCOPE:
Type: int
Description: Combined with the error kind bits to create the error codes of this handler.
             Distinguishes the errors of different handlers. Bits 1 .. 512 are used by the ErrorKind values.

exposed_relations:
Type: Tuple[str]
Description: The relationships clients may request with include=.

loader:
Type: RelationLoader
Description: Loads the requested relationships of the primary result.

handle_get, handle_post, handle_patch, handle_put, handle_delete:
Type: method
Description: Operation for the http method. Takes the Request and returns
             - a Single or Many result, the requested relationships will be included in the response
             - a Response, which is returned as-is
             - None, if the requested instance doesn't exist
"""
from http import HTTPStatus
from typing import Any, Callable, Dict, FrozenSet, List, Tuple, Union
from .config import get_config
from .errors import Error, ErrorCode, ErrorKind, GenericError, MethodNotAllowedError, NotFoundError
from .linked import get_linked_resources
from .relations import RelationLoader, SQLAlchemyRelationLoader, eager_load_options
from .request import HttpMethod, Request
from .response import Response
from .result import Many, Single
from .util import classproperty


class Handler:
    """
    Base class used to extend resource type handlers from
    """

    ERROR_SCOPE = 0
    exposed_relations: Tuple[str, ...] = ()
    loader: RelationLoader = SQLAlchemyRelationLoader()

    # http method -> operation, built when the subclass is created
    _operations: Dict[HttpMethod, Callable] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls._operations = {}
        for method in HttpMethod:
            operation = getattr(cls, method.handler_name, None)
            if callable(operation):
                cls._operations[method] = operation

    def __init__(self, request: Request) -> None:
        """
        :param request: the request this handler will fulfill
        """
        self.request = request

    @classmethod
    def supports_method(cls, method: Union[str, HttpMethod]) -> bool:
        """
        Check whether an http method is supported for the resource type

        :param method: http method
        :return: boolean
        """
        try:
            method = HttpMethod.parse(method)
        except ValueError:
            return False
        return method in cls._operations

    @classproperty
    def http_methods(cls) -> FrozenSet[str]:
        """
        :return: the supported http methods
        """
        return frozenset(method.value for method in cls._operations)

    @classproperty
    def collection_name(cls) -> str:
        """
        :return: name used to construct the endpoint, e.g. PostHandler => Post
        """
        name = cls.__name__
        return name[: -len("Handler")] if name.endswith("Handler") and name != "Handler" else name

    def fulfill_request(self) -> Response:
        """
        Fulfill the api request and return a response

        :return: Response
        """
        method = self.request.method
        operation = self._operations.get(method)
        if operation is None:
            raise MethodNotAllowedError(f"{method.value} not supported", api_code=HTTPStatus.METHOD_NOT_ALLOWED.value)

        result = operation(self, self.request)

        if result is None or (isinstance(result, Single) and result.entity is None):
            raise NotFoundError("Unknown ID", HTTPStatus.NOT_FOUND.value, api_code=self.error_code(ErrorKind.UNKNOWN_ID))

        if isinstance(result, Response):
            return result

        if not isinstance(result, (Single, Many)):
            raise GenericError(f"{type(self).__name__}.{method.handler_name} returned {type(result).__name__}, expected Single or Many")

        loaded = self.loader.load(result, self.exposed_relations_from_request())
        return Response(
            result,
            linked=self.get_linked_resources(result, loaded),
            errors=self.get_non_breaking_errors(),
        )

    def requested_relations(self) -> Tuple[str, ...]:
        """
        :return: the include names of the request, without the "include all" marker
        """
        include_all = get_config("INCLUDE_ALL")
        return tuple(rel_name for rel_name in self.request.include if rel_name != include_all)

    def exposed_relations_from_request(self) -> List[str]:
        """
        Returns which requested linked resources are available, in the order of `exposed_relations`

        :return: list of relationship names
        """
        if get_config("INCLUDE_ALL") in self.request.include:
            return list(self.exposed_relations)
        requested = set(self.request.include)
        return [rel_name for rel_name in self.exposed_relations if rel_name in requested]

    def unknown_relations_from_request(self) -> List[str]:
        """
        Returns which of the requested linked resources are not available, in the requested order

        :return: list of relationship names
        """
        return [rel_name for rel_name in self.requested_relations() if rel_name not in self.exposed_relations]

    def get_linked_resources(self, result: Union[Single, Many], loaded: Any) -> Dict[str, List[Any]]:
        """
        :return: dict of relationship name -> deduplicated related instances
        """
        return get_linked_resources(result, loaded)

    def get_non_breaking_errors(self) -> List[Error]:
        """
        Return errors which did not prevent the api from returning a result set

        :return: list of Error
        """
        errors = []

        unknown_relations = self.unknown_relations_from_request()
        if unknown_relations:
            errors.append(
                Error(
                    code=self.error_code(ErrorKind.UNKNOWN_LINKED_RESOURCES),
                    title="Unknown linked resources requested",
                    description="These linked resources are not available: " + ", ".join(unknown_relations),
                )
            )

        return errors

    @classmethod
    def error_code(cls, kind: int) -> ErrorCode:
        """
        :param kind: ErrorKind or handler specific error bit
        :return: error code scoped to this handler
        """
        return ErrorCode(cls.ERROR_SCOPE, kind)

    def load_options(self, model: Any) -> List[Any]:
        """
        Query options to eager load the relationships that will be included, e.g.

        def handle_get(self, request):
            query = db.session.query(Post).options(*self.load_options(Post))
            return Many(query.all())

        :param model: sqlalchemy model class
        :return: list of sqlalchemy loader options
        """
        return eager_load_options(model, self.exposed_relations_from_request())
