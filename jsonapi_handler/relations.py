# Relation loading
#
# A RelationLoader fetches the related instances of the primary result for a set of
# relationship names. The fetched instances are stored in a LoadedRelations side table,
# the persistence objects themselves are not modified.
#
# pylint: disable=logging-format-interpolation
#
from collections.abc import Set
from typing import Any, Dict, Iterable, List, Optional, Tuple
import sqlalchemy
from sqlalchemy.orm import selectinload
import jsonapi_handler
from .config import get_int_config
from .result import entity_id, is_hashable

# lazy loading strategies that accept loader options, we can't set options for 'dynamic'/'raise'/'noload'
EAGER_LOADABLE = ["select", "joined", "subquery", "selectin"]


class LoadedRelations:
    """
    Side table: primary instance -> {relationship name -> [related instances]}

    Instances are keyed by their id, instances without an id (unsaved) are keyed by identity.
    Unhashable ids are kept in a list and looked up by equality
    """

    def __init__(self) -> None:
        self._relations: Dict[Tuple[str, Any], Dict[str, List[Any]]] = {}
        self._unhashable: List[Tuple[Tuple[str, Any], Dict[str, List[Any]]]] = []

    @staticmethod
    def key(instance: Any) -> Tuple[str, Any]:
        instance_id = entity_id(instance)
        if instance_id is None:
            return ("object", id(instance))
        return ("id", instance_id)

    def _lookup(self, instance: Any, create: bool = False) -> Optional[Dict[str, List[Any]]]:
        key = self.key(instance)
        if is_hashable(key):
            if create:
                return self._relations.setdefault(key, {})
            return self._relations.get(key)

        for other_key, relations in self._unhashable:
            if other_key == key:
                return relations
        if not create:
            return None
        relations = {}
        self._unhashable.append((key, relations))
        return relations

    def add(self, instance: Any, rel_name: str, related: Iterable[Any]) -> None:
        """
        :param instance: primary instance
        :param rel_name: relationship name
        :param related: the instances related to `instance` through `rel_name`
        """
        self._lookup(instance, create=True)[rel_name] = list(related)

    def get(self, instance: Any) -> Dict[str, List[Any]]:
        """
        :param instance: primary instance
        :return: dict of relationship names -> related instances, in load order
        """
        return self._lookup(instance) or {}

    def __len__(self) -> int:
        return len(self._relations) + len(self._unhashable)


class RelationLoader:
    """
    Base loader: iterate the primary instances and fetch the requested relationships
    """

    def load(self, result: Iterable[Any], relation_names: Iterable[str]) -> LoadedRelations:
        """
        :param result: Single or Many primary result
        :param relation_names: names of the relationships to load
        :return: LoadedRelations side table (empty when no relationships were requested)
        """
        loaded = LoadedRelations()
        relation_names = list(relation_names)
        if not relation_names:
            return loaded

        for instance in result:
            for rel_name in relation_names:
                loaded.add(instance, rel_name, self.fetch(instance, rel_name))
        return loaded

    def fetch(self, instance: Any, rel_name: str) -> List[Any]:
        """
        :return: list of instances related to `instance`
        """
        raise NotImplementedError


class AttributeRelationLoader(RelationLoader):
    """
    Reads the relationships as attributes of the primary instances
    - None => []
    - list, tuple, set or query => list
    - any other object => [object]
    """

    def fetch(self, instance: Any, rel_name: str) -> List[Any]:
        # AttributeError propagates: the relationship doesn't exist on the instance
        value = getattr(instance, rel_name)
        if value is None:
            return []
        if self.is_tomany(instance, rel_name, value):
            return self.fetch_many(rel_name, value)
        return [value]

    def is_tomany(self, instance: Any, rel_name: str, value: Any) -> bool:
        return isinstance(value, (list, tuple, Set)) or callable(getattr(value, "all", None))

    def fetch_many(self, rel_name: str, value: Any) -> List[Any]:
        if callable(getattr(value, "all", None)):
            return list(value.all())
        return list(value)


class SQLAlchemyRelationLoader(AttributeRelationLoader):
    """
    Loader for sqlalchemy mapped instances
    - the relationship direction (uselist) determines whether the relationship is tomany
    - tomany relationships are truncated to `limit` items (RELATED_LIMIT config by default)
    - lazy='dynamic' relationships are queried with the limit
    Instances that aren't mapped are handled by AttributeRelationLoader
    """

    def __init__(self, limit: Optional[int] = None) -> None:
        self.limit = limit

    def get_limit(self) -> int:
        if self.limit is not None:
            return self.limit
        return get_int_config("RELATED_LIMIT")

    def is_tomany(self, instance: Any, rel_name: str, value: Any) -> bool:
        relationship = get_relationship(type(instance), rel_name)
        if relationship is None:
            return super().is_tomany(instance, rel_name, value)
        return bool(relationship.uselist)

    def fetch_many(self, rel_name: str, value: Any) -> List[Any]:
        limit = self.get_limit()
        if getattr(value, "limit", False):
            # lazy='dynamic' relationship: AppenderQuery
            count = value.count()
            items = value.limit(limit).all()
        else:  # InstrumentedList
            count = len(value)
            items = list(value)[:limit]

        if count > limit:
            jsonapi_handler.log.warning(f'Truncated result for relationship "{rel_name}" ({count} > {limit})')
        elif count >= get_int_config("BIG_QUERY_THRESHOLD"):
            jsonapi_handler.log.warning(f'Big result for relationship "{rel_name}" ({count} items)')
        jsonapi_handler.log.debug(f"Loaded {len(items)} {rel_name} items")
        return items


def get_relationship(model: Any, rel_name: str) -> Any:
    """
    :param model: sqlalchemy model class
    :param rel_name: relationship name
    :return: the sqlalchemy RelationshipProperty or None if model isn't mapped or has no such relationship
    """
    mapper = sqlalchemy.inspect(model, raiseerr=False)
    relationships = getattr(mapper, "relationships", None)
    if relationships is None or rel_name not in relationships:
        return None
    return relationships[rel_name]


def eager_load_options(model: Any, relation_names: Iterable[str]) -> List[Any]:
    """
    Create the loader options for a query of `model` so the relationships that will be included
    are loaded with the query instead of one query per instance
    See: https://docs.sqlalchemy.org/en/20/orm/queryguide/relationships.html

    :param model: sqlalchemy model class
    :param relation_names: relationship names
    :return: list of query options
    """
    options = []
    for rel_name in relation_names:
        relationship = get_relationship(model, rel_name)
        if relationship is None:
            jsonapi_handler.log.debug(f"Not a relationship : {model}.{rel_name}")
            continue
        if relationship.lazy not in EAGER_LOADABLE:
            # e.g. lazy='dynamic'
            continue
        options.append(selectinload(getattr(model, rel_name)))
    return options
