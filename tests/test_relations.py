from types import SimpleNamespace
import pytest
from blog import Author, Comment, Post, Tag, db
from jsonapi_handler import AttributeRelationLoader, Many, SQLAlchemyRelationLoader, Single
from jsonapi_handler.relations import eager_load_options, get_relationship


def test_load_relationships(app):
    post = db.session.get(Post, 1)
    loaded = SQLAlchemyRelationLoader().load(Single(post), ["author", "tags", "comments"])

    related = loaded.get(post)
    assert list(related) == ["author", "tags", "comments"]
    assert related["author"] == [db.session.get(Author, 1)]
    assert [tag.name for tag in related["tags"]] == ["python", "flask"]
    assert [comment.id for comment in related["comments"]] == [1, 2]


def test_load_nothing(app):
    loaded = SQLAlchemyRelationLoader().load(Many(db.session.query(Post).all()), [])
    assert len(loaded) == 0


def test_empty_relationships(app):
    post = Post(id=4, title="orphan")
    db.session.add(post)
    db.session.commit()

    related = SQLAlchemyRelationLoader().load(Single(post), ["author", "tags", "comments"]).get(post)
    assert related == {"author": [], "tags": [], "comments": []}


def test_related_limit(app, caplog):
    post = db.session.get(Post, 1)
    related = SQLAlchemyRelationLoader(limit=1).load(Single(post), ["tags", "comments"]).get(post)

    assert [tag.id for tag in related["tags"]] == [1]
    assert [comment.id for comment in related["comments"]] == [1]
    assert 'Truncated result for relationship "tags" (2 > 1)' in caplog.text


def test_related_limit_config(app):
    app.config["RELATED_LIMIT"] = 1
    author = db.session.get(Author, 1)
    related = SQLAlchemyRelationLoader().load(Single(author), ["posts"]).get(author)
    assert [post.id for post in related["posts"]] == [1]


def test_unmapped_instances():
    tag = SimpleNamespace(id="t1")
    post = SimpleNamespace(id="p1", tags=(tag,), author=tag, editor=None)
    related = SQLAlchemyRelationLoader(limit=10).load(Single(post), ["tags", "author", "editor"]).get(post)
    assert related == {"tags": [tag], "author": [tag], "editor": []}


def test_attribute_loader_query(app):
    post = db.session.get(Post, 1)
    related = AttributeRelationLoader().load(Single(post), ["comments"]).get(post)
    assert [comment.body for comment in related["comments"]] == ["nice", "+1"]


def test_unknown_attribute(app):
    post = db.session.get(Post, 1)
    with pytest.raises(AttributeError):
        SQLAlchemyRelationLoader().load(Single(post), ["nope"])


def test_get_relationship():
    assert get_relationship(Post, "author").uselist is False
    assert get_relationship(Post, "tags").uselist is True
    assert get_relationship(Post, "title") is None
    assert get_relationship(SimpleNamespace, "tags") is None


def test_eager_load_options(app):
    options = eager_load_options(Post, ["author", "tags", "comments", "title"])
    # comments is lazy="dynamic"
    assert len(options) == 2

    posts = db.session.query(Post).options(*options).order_by(Post.id).all()
    assert [post.author.name for post in posts] == ["alice", "alice", "bob"]
    assert [tag.name for tag in posts[1].tags] == ["flask", "sql"]


def test_tag_and_comment_models(app):
    assert db.session.query(Tag).count() == 3
    assert db.session.get(Comment, 1).post.title == "first"
