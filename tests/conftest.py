import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from kanban.database import get_session
from kanban.main import app
from kanban.models import Label, Member


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(engine):
    def get_test_session():
        session = Session(engine, autoflush=False)
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_session] = get_test_session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def labels(session):
    items = [Label(name="Bug", color="#eb5a46"), Label(name="Feature", color="#61bd4f")]
    ids = [label.id for label in items]
    session.add_all(items)
    session.commit()
    return ids


@pytest.fixture
def members(session):
    items = [
        Member(name="John Doe", email="john@example.com"),
        Member(name="Jane Smith", email="jane@example.com"),
    ]
    ids = [member.id for member in items]
    session.add_all(items)
    session.commit()
    return ids


@pytest.fixture
def board(client):
    return client.post("/api/boards", json={"title": "Roadmap"}).json()


@pytest.fixture
def make_list(client, board):
    def make(title, board_id=None):
        response = client.post("/api/lists", json={"boardId": board_id or board["id"], "title": title})
        assert response.status_code == 201
        return response.json()
    return make


@pytest.fixture
def make_card(client):
    def make(list_id, title, **extra):
        response = client.post("/api/cards", json={"listId": list_id, "title": title, **extra})
        assert response.status_code == 201
        return response.json()
    return make


@pytest.fixture
def layout(client, board):
    """Card titles per list title, in position order, as the board endpoint shows them."""
    def read():
        full_board = client.get(f"/api/boards/{board['id']}").json()
        return {
            board_list["title"]: [card["title"] for card in board_list["cards"]]
            for board_list in full_board["lists"]
        }
    return read
