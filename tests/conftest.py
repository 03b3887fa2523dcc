"""Shared test fixtures for Fusion Board tests."""

import tempfile
from pathlib import Path

import pytest

from fusionboard.gateway import MutationGateway
from fusionboard.schema import Task
from fusionboard.store import BoardStore


def _unlink_db(db_path: str):
    for suffix in ("", "-wal", "-shm"):
        Path(db_path + suffix).unlink(missing_ok=True)


@pytest.fixture
def db_path():
    """Temporary SQLite file, removed afterwards."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as tmp:
        path = tmp.name
    try:
        yield path
    finally:
        _unlink_db(path)


@pytest.fixture
def store(db_path):
    """Store seeded with the initial board (t1..t5)."""
    return BoardStore(db_path)


@pytest.fixture
def abc_store(store):
    """Store holding exactly A(todo), B(todo), C(done) at order 0, 1, 2."""
    for task_id in ("t1", "t2", "t3", "t4", "t5"):
        store.delete_task(task_id)
    tasks = [
        Task(id="A", title="A", status="todo", context="c1"),
        Task(id="B", title="B", status="todo", context="c1"),
        Task(id="C", title="C", status="done", context="c2"),
    ]
    for task in tasks:
        store.create_task(task)
    store.reorder_batch(tasks)
    return store


@pytest.fixture
def gateway(store):
    gw = MutationGateway(store)
    yield gw
    gw.close()


@pytest.fixture
def abc_gateway(abc_store):
    gw = MutationGateway(abc_store)
    yield gw
    gw.close()
