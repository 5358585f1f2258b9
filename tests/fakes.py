"""In-memory stand-in for the parts of the Supabase client the app uses."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional


class FakeBackendError(Exception):
    pass


@dataclass
class FakeResponse:
    data: List[Dict[str, Any]]


@dataclass
class FakeUpload:
    path: str
    full_path: str


class FakeQuery:
    def __init__(self, backend: "FakeSupabase", table: str):
        self.backend = backend
        self.table = table
        self.op = "select"
        self.columns = "*"
        self.payload: Any = None
        self.filters: List[tuple] = []
        self.order_by: Optional[tuple] = None
        self.limit_n: Optional[int] = None

    # builders
    def select(self, columns: str = "*", **kwargs):
        self.op, self.columns = "select", columns
        return self

    def insert(self, row):
        self.op, self.payload = "insert", row
        return self

    def update(self, values):
        self.op, self.payload = "update", values
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def limit(self, n):
        self.limit_n = n
        return self

    def _matches(self, row):
        return all(row.get(c) == v for c, v in self.filters)

    def execute(self) -> FakeResponse:
        b = self.backend
        b.calls.append((self.op, self.table))
        if self.op in b.fail_on:
            raise FakeBackendError(f"{self.op} failed")
        rows = b.tables.setdefault(self.table, [])

        if self.op == "insert":
            new = b.make_row(self.payload)
            rows.append(new)
            return FakeResponse([dict(new)])

        if self.op == "update":
            hit = [r for r in rows if self._matches(r)]
            for r in hit:
                r.update(self.payload)
            return FakeResponse([dict(r) for r in hit])

        if self.op == "delete":
            hit = [r for r in rows if self._matches(r)]
            b.tables[self.table] = [r for r in rows if not self._matches(r)]
            return FakeResponse([dict(r) for r in hit])

        out = [r for r in rows if self._matches(r)]
        if self.order_by:
            col, desc = self.order_by
            out = sorted(out, key=lambda r: r[col], reverse=desc)
        if self.limit_n is not None:
            out = out[: self.limit_n]
        if self.columns.strip() != "*":
            cols = [c.strip() for c in self.columns.split(",")]
            out = [{c: r.get(c) for c in cols} for r in out]
        else:
            out = [dict(r) for r in out]
        return FakeResponse(out)


class FakeBucket:
    def __init__(self, backend: "FakeSupabase", name: str):
        self.backend = backend
        self.name = name

    def upload(self, path, file, file_options=None):
        self.backend.calls.append(("upload", self.name))
        if "upload" in self.backend.fail_on:
            raise FakeBackendError("upload failed")
        self.backend.blobs[(self.name, path)] = (bytes(file), dict(file_options or {}))
        return FakeUpload(path=path, full_path=f"{self.name}/{path}")

    def get_public_url(self, path):
        return f"https://fake.supabase.co/storage/v1/object/public/{self.name}/{path}"


class FakeStorage:
    def __init__(self, backend: "FakeSupabase"):
        self.backend = backend

    def from_(self, bucket):
        return FakeBucket(self.backend, bucket)


@dataclass
class FakeSupabase:
    tables: Dict[str, List[Dict[str, Any]]] = field(default_factory=dict)
    blobs: Dict[tuple, tuple] = field(default_factory=dict)
    calls: List[tuple] = field(default_factory=list)
    fail_on: set = field(default_factory=set)
    start: datetime = datetime(2025, 12, 1, 9, 0, tzinfo=timezone.utc)

    def __post_init__(self):
        self.storage = FakeStorage(self)
        self._tick = 0

    def table(self, name):
        return FakeQuery(self, name)

    def make_row(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        self._tick += 1
        row = {"is_read": False, "behavior": "nice", "age": None, "email": None,
               "phone": None, "image_url": None}
        row.update(payload)
        row.setdefault("id", str(uuid.uuid4()))
        row.setdefault("created_at", (self.start + timedelta(minutes=self._tick)).isoformat())
        return row

    def seed(self, table: str, *rows: Dict[str, Any]) -> List[Dict[str, Any]]:
        made = [self.make_row(r) for r in rows]
        self.tables.setdefault(table, []).extend(made)
        return made
