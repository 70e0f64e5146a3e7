from typing import Any, Callable


class classproperty:  # pylint: disable=invalid-name
    """
    Read-only property computed from the class, e.g. PostHandler.collection_name
    """

    def __init__(self, fget: Callable[[type], Any]) -> None:
        self.fget = fget
        self.__doc__ = fget.__doc__

    def __get__(self, obj: Any, owner: Any = None) -> Any:
        if owner is None:
            owner = type(obj)
        return self.fget(owner)
