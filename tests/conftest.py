"""
Shared fixtures: a file-backed SQLite database with the simulacro schema,
a ConnectionPool over it, and a TestClient for the API.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import text

from database import ConnectionPool
from main import create_app


SCHEMA = [
    "CREATE TABLE areas (id INTEGER PRIMARY KEY, denominacion TEXT NOT NULL)",
    "CREATE TABLE estudiantes (id INTEGER PRIMARY KEY, nro_documento TEXT NOT NULL)",
    """CREATE TABLE inscripciones (
        id INTEGER PRIMARY KEY,
        estudiantes_id INTEGER NOT NULL,
        areas_id INTEGER NOT NULL,
        periodos_id INTEGER NOT NULL
    )""",
    "CREATE TABLE inscripcion_simulacros (id INTEGER PRIMARY KEY, nro_documento TEXT NOT NULL)",
    "CREATE TABLE banco_pagos (id INTEGER PRIMARY KEY, fch_pag TEXT NOT NULL, imp_pag NUMERIC NOT NULL)",
]


def make_pool(url: str, **kwargs) -> ConnectionPool:
    return ConnectionPool(url, connect_args={"check_same_thread": False}, **kwargs)


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'simulacros.db'}"


@pytest.fixture
def pool(database_url):
    pool = make_pool(database_url, size=10)
    with pool.engine.begin() as conn:
        for statement in SCHEMA:
            conn.execute(text(statement))
    yield pool
    pool.dispose()


@pytest.fixture
def seeded_pool(pool):
    """
    Areas are inserted out of alphabetical order. Student 222 enrolled in the
    simulacro twice, 444 is in an area but never enrolled, 555 enrolled
    without a student record, and 111 has a period-2 row that must be ignored.
    """
    with pool.engine.begin() as conn:
        conn.execute(
            text("INSERT INTO areas (id, denominacion) VALUES (:id, :name)"),
            [
                {"id": 1, "name": "Sociales"},
                {"id": 2, "name": "Biomédicas"},
                {"id": 3, "name": "Ingenierías"},
            ],
        )
        conn.execute(
            text("INSERT INTO estudiantes (id, nro_documento) VALUES (:id, :doc)"),
            [
                {"id": 1, "doc": "111"},
                {"id": 2, "doc": "222"},
                {"id": 3, "doc": "333"},
                {"id": 4, "doc": "444"},
            ],
        )
        conn.execute(
            text(
                "INSERT INTO inscripciones (estudiantes_id, areas_id, periodos_id) "
                "VALUES (:student, :area, :period)"
            ),
            [
                {"student": 1, "area": 1, "period": 1},
                {"student": 1, "area": 3, "period": 1},
                {"student": 1, "area": 2, "period": 2},
                {"student": 2, "area": 2, "period": 1},
                {"student": 3, "area": 2, "period": 1},
                {"student": 4, "area": 3, "period": 1},
            ],
        )
        conn.execute(
            text("INSERT INTO inscripcion_simulacros (nro_documento) VALUES (:doc)"),
            [{"doc": d} for d in ("111", "222", "222", "333", "555")],
        )
        conn.execute(
            text("INSERT INTO banco_pagos (fch_pag, imp_pag) VALUES (:date, :amount)"),
            [
                {"date": "2025-11-26", "amount": 16},
                {"date": "2025-11-27", "amount": 14},
                {"date": "2025-11-27", "amount": 14.01},
                {"date": "2025-12-01", "amount": 15.5},
                {"date": "2025-12-01", "amount": 18.01},
                {"date": "2025-12-13", "amount": 18},
                {"date": "2025-12-14", "amount": 16},
            ],
        )
    return pool


@pytest.fixture
def static_dir(tmp_path):
    public = tmp_path / "public"
    public.mkdir()
    (public / "index.html").write_text("<html><body>dashboard</body></html>", encoding="utf-8")
    (public / "app.js").write_text("console.log('stats');", encoding="utf-8")
    return public


@pytest.fixture
def client(seeded_pool, static_dir):
    with TestClient(create_app(pool=seeded_pool, static_dir=str(static_dir))) as client:
        yield client


@pytest.fixture
def pool_factory():
    """Build extra pools for a test; all are disposed afterwards."""
    pools = []

    def factory(url: str, **kwargs) -> ConnectionPool:
        pool = make_pool(url, **kwargs)
        pools.append(pool)
        return pool

    yield factory
    for pool in pools:
        pool.dispose()


@pytest.fixture
def unreachable_client(tmp_path, static_dir, pool_factory):
    pool = pool_factory(f"sqlite:///{tmp_path / 'missing' / 'nested' / 'db.sqlite'}", size=2)
    with TestClient(create_app(pool=pool, static_dir=str(static_dir))) as client:
        yield client
