"""
Tests for the Flask JSON API.
"""
import pytest

from fusionboard.config import Config
from fusionboard.server import create_app


@pytest.fixture
def client(store):
    app = create_app(Config(db_path=store.db_path), store=store)
    app.config["TESTING"] = True
    return app.test_client()


def test_board_status_view(client):
    """Test the board groups by status by default"""
    resp = client.get("/api/board")
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["view"] == "status"
    assert [c["id"] for c in data["columns"]] == ["todo", "doing", "done"]
    assert [t["id"] for t in data["columns"][0]["tasks"]] == ["t2", "t4", "t5"]
    assert [t["order"] for t in data["tasks"]] == [0, 1, 2, 3, 4]


def test_board_context_view(client):
    """Test the board groups by context on request"""
    data = client.get("/api/board?view=context").get_json()
    assert [c["id"] for c in data["columns"]] == ["c1", "c2", "c3"]
    assert data["columns"][0]["color"] == "#ff5252"


def test_board_bad_view(client):
    assert client.get("/api/board?view=calendar").status_code == 400


def test_add_task(client, store):
    """Test creating a task in a context column"""
    resp = client.post("/api/tasks", json={"column_id": "c2", "view": "context"})
    assert resp.status_code == 201
    task = resp.get_json()["task"]
    assert task["context"] == "c2"
    assert task["status"] == "todo"
    assert task["order"] == 5
    assert store.get_task(task["id"]) is not None


def test_add_task_requires_column(client):
    resp = client.post("/api/tasks", json={"view": "status"})
    assert resp.status_code == 400


def test_add_task_unknown_column(client):
    """Test a foreign-key violation is reported as a conflict"""
    resp = client.post("/api/tasks", json={"column_id": "nope", "view": "status"})
    assert resp.status_code == 409


def test_save_task(client, store):
    """Test overwriting a task keeps id and order"""
    resp = client.put("/api/tasks/t1", json={
        "id": "ignored", "title": "Fix Logout Bug", "status": "done",
        "context": "c1", "tags": ["Bug"], "color": "#fff0f0", "order": 42,
    })
    assert resp.status_code == 200
    assert resp.get_json()["task"]["order"] == 0
    stored = store.get_task("t1")
    assert stored.title == "Fix Logout Bug"
    assert stored.status == "done"
    assert stored.order == 0
    assert store.get_task("ignored") is None


def test_save_unknown_task(client):
    resp = client.put("/api/tasks/ghost", json={"title": "Boo", "status": "todo", "context": "c1"})
    assert resp.status_code == 404


def test_remove_task(client, store):
    resp = client.delete("/api/tasks/t3")
    assert resp.status_code == 200
    assert store.get_task("t3") is None


def test_move_tasks(client, store):
    """Test a move batch rewrites fields and dense order"""
    tasks = client.get("/api/board").get_json()["tasks"]
    first = tasks.pop(0)
    first["status"] = "done"
    tasks.append(first)

    resp = client.post("/api/tasks/move", json={"tasks": tasks})
    assert resp.status_code == 200
    assert resp.get_json()["count"] == 5

    snapshot = store.fetch_all()
    assert [t.id for t in snapshot.tasks] == ["t2", "t3", "t4", "t5", "t1"]
    assert [t.order for t in snapshot.tasks] == [0, 1, 2, 3, 4]
    assert snapshot.tasks[-1].status == "done"


def test_move_tasks_requires_list(client):
    assert client.post("/api/tasks/move", json={"tasks": "t1"}).status_code == 400


def test_add_context(client, store):
    """Test adding a list with a random colour"""
    resp = client.post("/api/contexts")
    assert resp.status_code == 201
    context = resp.get_json()["context"]
    assert context["title"] == "New List"
    assert context["color"].startswith("#")
    assert store.fetch_all().contexts[-1].id == context["id"]


def test_update_column(client, store):
    """Test renaming a context leaves tasks alone"""
    before = store.fetch_all().tasks
    resp = client.put("/api/columns/c2", json={"title": "Focus", "kind": "context"})
    assert resp.status_code == 200
    snapshot = store.fetch_all()
    assert {c.id: c.title for c in snapshot.contexts}["c2"] == "Focus"
    assert snapshot.tasks == before


def test_update_column_validation(client):
    assert client.put("/api/columns/c2", json={"kind": "context"}).status_code == 400
    assert client.put("/api/columns/c2", json={"title": "X", "kind": "lane"}).status_code == 400


def test_colors_and_health(client, store):
    colors = client.get("/api/colors").get_json()["colors"]
    assert colors[0] == {"hex": "#ffffff", "name": "Default"}
    health = client.get("/health").get_json()
    assert health == {"status": "ok", "db": store.db_path}
