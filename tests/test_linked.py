from types import SimpleNamespace
from jsonapi_handler import LoadedRelations, Many, Single, get_linked_resources


def test_empty_result():
    assert get_linked_resources(Many([]), LoadedRelations()) == {}
    assert get_linked_resources(Single(None), LoadedRelations()) == {}


def test_shared_related_instance_included_once():
    author = SimpleNamespace(id=7, name="alice")
    posts = [SimpleNamespace(id=i) for i in range(1, 4)]
    loaded = LoadedRelations()
    for post in posts:
        loaded.add(post, "author", [SimpleNamespace(id=7, name="alice")] if post.id > 1 else [author])

    linked = get_linked_resources(Many(posts), loaded)
    assert list(linked) == ["author"]
    assert len(linked["author"]) == 1
    assert linked["author"][0] is author


def test_dedup_is_per_relationship():
    person = SimpleNamespace(id=1)
    post = SimpleNamespace(id=10)
    loaded = LoadedRelations()
    loaded.add(post, "author", [person])
    loaded.add(post, "editor", [person])

    assert get_linked_resources(Single(post), loaded) == {"author": [person], "editor": [person]}


def test_relationship_order_first_seen():
    tag = SimpleNamespace(id="t")
    author = SimpleNamespace(id="a")
    first, second = SimpleNamespace(id=1), SimpleNamespace(id=2)
    loaded = LoadedRelations()
    loaded.add(first, "tags", [tag])
    loaded.add(second, "author", [author])
    loaded.add(second, "tags", [tag])

    linked = get_linked_resources(Many([first, second]), loaded)
    assert list(linked) == ["tags", "author"]
    assert linked["tags"] == [tag]


def test_related_without_id_never_deduplicated():
    draft = SimpleNamespace(id=None, title="draft")
    post = SimpleNamespace(id=1)
    loaded = LoadedRelations()
    loaded.add(post, "drafts", [draft, draft])

    assert get_linked_resources(Single(post), loaded)["drafts"] == [draft, draft]


def test_loaded_empty_relationship_has_empty_bucket():
    post = SimpleNamespace(id=1)
    loaded = LoadedRelations()
    loaded.add(post, "comments", [])

    assert get_linked_resources(Single(post), loaded) == {"comments": []}


def test_primary_without_loaded_relations():
    loaded = LoadedRelations()
    loaded.add(SimpleNamespace(id=1), "tags", [SimpleNamespace(id="t")])

    assert get_linked_resources(Single(SimpleNamespace(id=2)), loaded) == {}


def test_unsaved_primary_keyed_by_identity():
    first, second = SimpleNamespace(id=None), SimpleNamespace(id=None)
    tag = SimpleNamespace(id="t")
    loaded = LoadedRelations()
    loaded.add(first, "tags", [tag])

    assert len(loaded) == 1
    assert loaded.get(first) == {"tags": [tag]}
    assert loaded.get(second) == {}


def test_linked_is_idempotent():
    post = SimpleNamespace(id=1)
    loaded = LoadedRelations()
    loaded.add(post, "tags", [SimpleNamespace(id="a"), SimpleNamespace(id="b"), SimpleNamespace(id="a")])

    first = get_linked_resources(Single(post), loaded)
    second = get_linked_resources(Single(post), loaded)
    assert first == second
    assert [tag.id for tag in first["tags"]] == ["a", "b"]


def test_unhashable_related_ids():
    first, duplicate, other = SimpleNamespace(id=[1, 2]), SimpleNamespace(id=[1, 2]), SimpleNamespace(id=[3])
    post = SimpleNamespace(id=1)
    loaded = LoadedRelations()
    loaded.add(post, "parts", [first, duplicate, other])

    parts = get_linked_resources(Single(post), loaded)["parts"]
    assert parts == [first, other]
    assert parts[0] is first


def test_unhashable_primary_ids():
    tag = SimpleNamespace(id="t")
    first, same_id, other = SimpleNamespace(id=[1, "a"]), SimpleNamespace(id=[1, "a"]), SimpleNamespace(id=[2])
    loaded = LoadedRelations()
    loaded.add(first, "tags", [tag])

    assert len(loaded) == 1
    assert loaded.get(same_id) == {"tags": [tag]}
    assert loaded.get(other) == {}
    assert get_linked_resources(Many([first, other]), loaded) == {"tags": [tag]}
