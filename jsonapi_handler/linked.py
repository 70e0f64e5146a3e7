# Linked resources
#
# http://jsonapi.org/format/#document-compound-documents
# A compound document MUST NOT include more than one resource object for each type and id pair.
#
from typing import Any, Dict, Iterable, List, Set
from .relations import LoadedRelations
from .result import entity_id, is_hashable


def get_linked_resources(result: Iterable[Any], loaded: LoadedRelations) -> Dict[str, List[Any]]:
    """
    Iterate through the result set to collect the loaded related instances

    The related instances are grouped by relationship name, an instance is added only once
    per relationship (compared by id). Relationships and instances keep the order in which
    they were first encountered. Related instances without an id are never deduplicated.

    :param result: Single or Many primary result
    :param loaded: relationships loaded for the primary instances
    :return: dict of relationship name -> list of related instances
    """
    linked: Dict[str, List[Any]] = {}
    linked_ids: Dict[str, Set[Any]] = {}
    # ids that can't go in a set, e.g. lists
    unhashable_ids: Dict[str, List[Any]] = {}

    for instance in result:
        for rel_name, related in loaded.get(instance).items():
            bucket = linked.setdefault(rel_name, [])
            bucket_ids = linked_ids.setdefault(rel_name, set())
            bucket_unhashable_ids = unhashable_ids.setdefault(rel_name, [])
            for obj in related:
                obj_id = entity_id(obj)
                if obj_id is None:
                    bucket.append(obj)
                    continue
                # Check whether the instance is already included in the response on its id
                if is_hashable(obj_id):
                    if obj_id in bucket_ids:
                        continue
                    bucket_ids.add(obj_id)
                else:
                    if obj_id in bucket_unhashable_ids:
                        continue
                    bucket_unhashable_ids.append(obj_id)
                bucket.append(obj)

    return linked
