# Primary results returned by the handler operations
#
# An operation returns either a single instance or a collection of instances,
# wrapped in Single or Many so the handler doesn't have to guess which one it got.
# Both are iterable over the wrapped instances.
#
from dataclasses import dataclass
from typing import Any, Iterator, Sequence, Tuple, Union


@dataclass(frozen=True)
class Single:
    """
    A single instance, e.g. the result of GET /Users/1
    """

    entity: Any

    def __iter__(self) -> Iterator[Any]:
        if self.entity is not None:
            yield self.entity

    def __len__(self) -> int:
        return 0 if self.entity is None else 1


@dataclass(frozen=True, init=False)
class Many:
    """
    An ordered collection of instances, e.g. the result of GET /Users
    """

    entities: Tuple[Any, ...]

    def __init__(self, entities: Sequence[Any] = ()) -> None:
        object.__setattr__(self, "entities", tuple(entities))

    def __iter__(self) -> Iterator[Any]:
        return iter(self.entities)

    def __len__(self) -> int:
        return len(self.entities)


Result = Union[Single, Many]


def entity_id(instance: Any) -> Any:
    """
    :param instance: primary or related instance
    :return: the instance id, None if it has none (e.g. an unsaved instance)
    """
    return getattr(instance, "id", None)


def is_hashable(value: Any) -> bool:
    """
    Ids are usually hashable (int, str, uuid), list ids are compared with a linear scan
    """
    try:
        hash(value)
    except TypeError:
        return False
    return True
