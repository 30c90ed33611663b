"""
coaching/db.py
Store handles for Cadence.
All table access goes through a store returned by get_store().

A store never raises for a rejected query.  Every call returns a
StoreResponse; callers must check response.error before using data.
"""

import logging
import os
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

import httpx
import psycopg2
import streamlit as st
from dotenv import load_dotenv
from postgrest.exceptions import APIError
from psycopg2.extras import RealDictCursor
from supabase import Client, create_client

load_dotenv()

logger = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r"^[a-z_][a-z0-9_]*$")

# Characters PostgREST treats as syntax inside an or=(...) expression.
_RESERVED = set(',.:()" ')


# ─── Config ──────────────────────────────────────────────────────────────────

def get_secret(key: str, default: str | None = None) -> str | None:
    """
    Resolve a secret by name.

    Tries st.secrets first (Streamlit Cloud), then falls back to os.environ
    (local development via .env loaded above).  Returns default if the key is
    absent in both sources.
    """
    try:
        return st.secrets[key]
    except Exception:
        return os.environ.get(key, default)


# ─── Responses ───────────────────────────────────────────────────────────────

@dataclass
class StoreError:
    message: str
    code: str | None = None


@dataclass
class StoreResponse:
    """Result of one store call: rows on success, error on rejection."""

    data: list[dict] = field(default_factory=list)
    error: StoreError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def first(self) -> dict | None:
        return self.data[0] if self.data else None


# ─── Store interface ─────────────────────────────────────────────────────────

class BaseStore(ABC):
    """
    Generic table interface shared by every backend.

    Filters:
      eq      - {column: value}, all must match
      any_of  - [{column: value, ...}, ...], at least one group must match
                in full; combined with eq by AND
    """

    @abstractmethod
    def select(
        self,
        table: str,
        columns: str = "*",
        eq: dict | None = None,
        any_of: list[dict] | None = None,
        order_by: str | None = None,
        ascending: bool = True,
    ) -> StoreResponse:
        """Rows of table matching the filters, optionally ordered."""

    @abstractmethod
    def insert(self, table: str, row: dict) -> StoreResponse:
        """Insert one row; data holds the stored row."""

    @abstractmethod
    def update(
        self,
        table: str,
        values: dict,
        eq: dict | None = None,
        any_of: list[dict] | None = None,
    ) -> StoreResponse:
        """Set values on matching rows; data holds the changed rows."""

    @abstractmethod
    def delete(
        self,
        table: str,
        eq: dict | None = None,
        any_of: list[dict] | None = None,
    ) -> StoreResponse:
        """Remove matching rows; data holds the removed rows."""


# ─── Supabase (PostgREST) backend ────────────────────────────────────────────

def _format_value(value) -> str:
    """Render a filter value for a PostgREST or=(...) expression."""
    text = str(value)
    if any(ch in _RESERVED for ch in text):
        escaped = text.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    return text


def or_expression(any_of: list[dict]) -> str:
    """
    Build the PostgREST or_() argument for a list of AND-groups.

    [{"sender_id": "a"}, {"receiver_email": "b@x.io", "status": "pending"}]
    becomes  sender_id.eq.a,and(receiver_email.eq."b@x.io",status.eq.pending)
    """
    parts = []
    for group in any_of:
        terms = [f"{column}.eq.{_format_value(value)}" for column, value in group.items()]
        if len(terms) == 1:
            parts.append(terms[0])
        else:
            parts.append(f"and({','.join(terms)})")
    return ",".join(parts)


class SupabaseStore(BaseStore):
    """Store backed by the Supabase PostgREST API (subject to RLS)."""

    def __init__(self, client: Client):
        self._client = client

    def _filtered(self, query, eq, any_of):
        for column, value in (eq or {}).items():
            query = query.eq(column, value)
        if any_of:
            query = query.or_(or_expression(any_of))
        return query

    def _execute(self, query, table: str) -> StoreResponse:
        try:
            response = query.execute()
        except APIError as exc:
            logger.warning("Store rejected request on %s: %s", table, exc.message)
            return StoreResponse(error=StoreError(exc.message or str(exc), exc.code))
        except httpx.HTTPError as exc:
            logger.warning("Store request on %s failed: %s", table, exc)
            return StoreResponse(error=StoreError(str(exc)))
        return StoreResponse(data=list(response.data or []))

    def select(self, table, columns="*", eq=None, any_of=None, order_by=None, ascending=True):
        query = self._filtered(self._client.table(table).select(columns), eq, any_of)
        if order_by:
            query = query.order(order_by, desc=not ascending)
        return self._execute(query, table)

    def insert(self, table, row):
        return self._execute(self._client.table(table).insert(row), table)

    def update(self, table, values, eq=None, any_of=None):
        query = self._filtered(self._client.table(table).update(values), eq, any_of)
        return self._execute(query, table)

    def delete(self, table, eq=None, any_of=None):
        query = self._filtered(self._client.table(table).delete(), eq, any_of)
        return self._execute(query, table)


# ─── Direct Postgres backend ─────────────────────────────────────────────────

def _ident(name: str) -> str:
    """Return name if it is a plain lower-case SQL identifier, else raise."""
    if not _IDENTIFIER.match(name):
        raise ValueError(f"Invalid identifier: {name!r}")
    return name


def where_clause(eq: dict | None, any_of: list[dict] | None) -> tuple[str, list]:
    """
    Build a parameterised WHERE clause from eq / any_of filters.

    Returns ("", []) when there are no filters.  Placeholders are psycopg2
    %s markers; values are returned in placeholder order.
    """
    clauses: list[str] = []
    params: list = []

    for column, value in (eq or {}).items():
        clauses.append(f"{_ident(column)} = %s")
        params.append(value)

    if any_of:
        groups = []
        for group in any_of:
            terms = []
            for column, value in group.items():
                terms.append(f"{_ident(column)} = %s")
                params.append(value)
            groups.append("(" + " AND ".join(terms) + ")")
        clauses.append("(" + " OR ".join(groups) + ")")

    if not clauses:
        return "", []
    return " WHERE " + " AND ".join(clauses), params


class PostgresStore(BaseStore):
    """
    Store backed by a direct psycopg2 connection.

    connect is a zero-argument callable returning a new connection; each call
    opens and closes its own connection.  Bypasses RLS, so row ownership rules
    enforced by Supabase policies must also be enforced by the callers.
    """

    def __init__(self, connect=None):
        self._connect = connect or get_pg_connection

    def _run(self, sql: str, params: list, table: str, write: bool) -> StoreResponse:
        try:
            conn = self._connect()
        except psycopg2.Error as exc:
            logger.warning("Store connection for %s failed: %s", table, exc)
            return StoreResponse(error=StoreError(str(exc).strip(), exc.pgcode))

        try:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute(sql, params)
                rows = [dict(row) for row in cur.fetchall()]
            if write:
                conn.commit()
            return StoreResponse(data=rows)
        except psycopg2.Error as exc:
            if write:
                conn.rollback()
            message = str(exc).strip()
            logger.warning("Store rejected request on %s: %s", table, message)
            return StoreResponse(error=StoreError(message, exc.pgcode))
        finally:
            conn.close()

    def select(self, table, columns="*", eq=None, any_of=None, order_by=None, ascending=True):
        if columns.strip() == "*":
            column_sql = "*"
        else:
            column_sql = ", ".join(_ident(c.strip()) for c in columns.split(","))
        where, params = where_clause(eq, any_of)
        sql = f"SELECT {column_sql} FROM {_ident(table)}{where}"
        if order_by:
            sql += f" ORDER BY {_ident(order_by)} {'ASC' if ascending else 'DESC'}"
        return self._run(sql, params, table, write=False)

    def insert(self, table, row):
        columns = [_ident(c) for c in row]
        placeholders = ", ".join(["%s"] * len(columns))
        sql = (
            f"INSERT INTO {_ident(table)} ({', '.join(columns)}) "
            f"VALUES ({placeholders}) RETURNING *"
        )
        return self._run(sql, list(row.values()), table, write=True)

    def update(self, table, values, eq=None, any_of=None):
        assignments = ", ".join(f"{_ident(c)} = %s" for c in values)
        where, params = where_clause(eq, any_of)
        sql = f"UPDATE {_ident(table)} SET {assignments}{where} RETURNING *"
        return self._run(sql, list(values.values()) + params, table, write=True)

    def delete(self, table, eq=None, any_of=None):
        where, params = where_clause(eq, any_of)
        sql = f"DELETE FROM {_ident(table)}{where} RETURNING *"
        return self._run(sql, params, table, write=True)


# ─── Clients ─────────────────────────────────────────────────────────────────

def get_supabase_client() -> Client:
    """
    Return a Supabase client authenticated with the anon key.

    Intentionally not cached - Auth state is per-session and must not bleed
    between Streamlit reruns or users.
    """
    url = get_secret("SUPABASE_URL")
    key = get_secret("SUPABASE_ANON_KEY")
    return create_client(url, key)


def get_pg_connection():
    """
    Return a raw psycopg2 connection to the Supabase PostgreSQL database.

    sslmode is set to 'require' and connect_timeout to 15 seconds.
    The caller is responsible for closing the connection when finished.
    """
    return psycopg2.connect(
        host=get_secret("DB_HOST"),
        port=get_secret("DB_PORT"),
        dbname=get_secret("DB_NAME"),
        user=get_secret("DB_USER"),
        password=get_secret("DB_PASSWORD"),
        sslmode="require",
        connect_timeout=15,
    )


def get_store(access_token: str | None = None) -> BaseStore:
    """
    Return the store handle configured by STORE_BACKEND.

    'supabase' (default) talks to PostgREST with the anon key; when an
    access_token is given the request runs as that user so RLS policies
    apply.  'postgres' uses a direct psycopg2 connection.
    """
    backend = (get_secret("STORE_BACKEND", "supabase") or "supabase").lower()
    if backend == "postgres":
        return PostgresStore(get_pg_connection)
    if backend != "supabase":
        raise ValueError(f"Unknown STORE_BACKEND: {backend}")

    client = get_supabase_client()
    if access_token:
        client.postgrest.auth(access_token)
    return SupabaseStore(client)
