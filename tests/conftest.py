import pytest
from blog import create_app, db, populate


@pytest.fixture
def app():
    app = create_app()
    with app.app_context():
        db.create_all()
        populate()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()
