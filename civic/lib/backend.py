"""Hosted backend (Supabase) client wrapper.

Thin layer over supabase-py giving the query functions a small, stable
surface: table reads/writes and edge function invocation. Failures are
logged and raised as BackendError / BackendFunctionError.

Example usage:
    from civic.lib.backend import BackendClient

    backend = BackendClient.from_env()
    topics = backend.select("topics", order=["name"])
    payload = backend.invoke("fetch-representatives", {"fetchAll": True})
"""

import json
import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from postgrest.exceptions import APIError
from supabase import Client, FunctionsError, create_client

from civic.lib import config

logger = logging.getLogger(__name__)

# Column name, or (column, ascending)
OrderSpec = Union[str, Tuple[str, bool]]


class BackendError(Exception):
    """Raised when a table query against the hosted database fails."""

    pass


class BackendFunctionError(BackendError):
    """Raised when an edge function invocation fails."""

    pass


def get_supabase_client(url: Optional[str] = None, key: Optional[str] = None) -> Client:
    """Create a Supabase client from arguments or SUPABASE_URL / SUPABASE_KEY."""
    return create_client(url or config.get_supabase_url(), key or config.get_supabase_key())


class BackendClient:
    """Table and function access for the civic app's hosted database."""

    def __init__(self, client: Client):
        self.client = client

    @classmethod
    def from_env(cls) -> "BackendClient":
        return cls(get_supabase_client())

    def _execute(self, query, table: str):
        try:
            return query.execute()
        except APIError as e:
            logger.error(f"Query on {table} failed: {e}")
            raise BackendError(f"Query on {table} failed: {e}") from e

    @staticmethod
    def _apply_filters(
        query,
        eq: Optional[Dict[str, Any]] = None,
        in_: Optional[Dict[str, Iterable[Any]]] = None,
    ):
        for column, value in (eq or {}).items():
            query = query.eq(column, value)
        for column, values in (in_ or {}).items():
            query = query.in_(column, list(values))
        return query

    # ==========================================================================
    # Reads
    # ==========================================================================

    def select(
        self,
        table: str,
        columns: str = "*",
        *,
        eq: Optional[Dict[str, Any]] = None,
        in_: Optional[Dict[str, Iterable[Any]]] = None,
        order: Optional[Sequence[OrderSpec]] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """Select rows from a table.

        Args:
            table: Table name
            columns: Column list (may include embedded joins)
            eq: Equality filters {column: value}
            in_: Membership filters {column: values}
            order: Columns to order by; a bare name sorts ascending
            limit: Max rows
            offset: Row offset (used together with limit as a range)

        Returns:
            List of row dicts (empty when nothing matches)
        """
        query = self.client.table(table).select(columns)
        query = self._apply_filters(query, eq, in_)

        for spec in order or []:
            column, ascending = (spec, True) if isinstance(spec, str) else spec
            query = query.order(column, desc=not ascending)

        if limit is not None and offset is not None:
            query = query.range(offset, offset + limit - 1)
        elif limit is not None:
            query = query.limit(limit)

        response = self._execute(query, table)
        return response.data or []

    def maybe_single(
        self,
        table: str,
        columns: str = "*",
        *,
        eq: Optional[Dict[str, Any]] = None,
    ) -> Optional[Dict[str, Any]]:
        """Select at most one row; None when no row matches."""
        query = self._apply_filters(self.client.table(table).select(columns), eq)
        response = self._execute(query.maybe_single(), table)
        # Newer supabase-py returns None instead of an empty response
        if response is None:
            return None
        return response.data

    def count(self, table: str, *, eq: Optional[Dict[str, Any]] = None) -> int:
        """Exact row count without fetching rows."""
        query = self.client.table(table).select("*", count="exact", head=True)
        query = self._apply_filters(query, eq)
        response = self._execute(query, table)
        return response.count or 0

    # ==========================================================================
    # Writes
    # ==========================================================================

    def insert(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        response = self._execute(self.client.table(table).insert(row), table)
        return response.data[0] if response.data else {}

    def update(
        self, table: str, values: Dict[str, Any], *, eq: Dict[str, Any]
    ) -> Dict[str, Any]:
        query = self._apply_filters(self.client.table(table).update(values), eq)
        response = self._execute(query, table)
        if not response.data:
            raise BackendError(f"No {table} row matched {eq}")
        return response.data[0]

    def delete(self, table: str, *, eq: Dict[str, Any]) -> None:
        query = self._apply_filters(self.client.table(table).delete(), eq)
        self._execute(query, table)

    # ==========================================================================
    # Edge Functions
    # ==========================================================================

    def invoke(self, function_name: str, body: Optional[Dict[str, Any]] = None) -> Any:
        """Invoke an edge function and return its decoded JSON payload.

        Raises:
            BackendFunctionError: On relay/HTTP errors or a non-JSON payload
        """
        logger.debug(f"Invoking {function_name} body={body}")
        try:
            data = self.client.functions.invoke(
                function_name,
                invoke_options={"body": body or {}, "responseType": "json"},
            )
        except FunctionsError as e:
            logger.error(f"Function {function_name} failed: {e}")
            raise BackendFunctionError(f"Function {function_name} failed: {e}") from e

        if isinstance(data, (bytes, str)):
            try:
                data = json.loads(data) if data else None
            except ValueError as e:
                logger.error(f"Invalid JSON from {function_name}: {e}")
                raise BackendFunctionError(
                    f"Invalid JSON from {function_name}: {e}"
                ) from e
        return data
