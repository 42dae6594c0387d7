"""
Backend gateway over the Supabase client.

Services never build PostgREST queries themselves; they describe what they
want with a table name, a filter dict and ordering options, and the gateway
turns that into a query-builder chain. Filter keys are column names with an
optional operator suffix:

    {"father_id": 7}                 father_id = 7
    {"id__neq": 7}                   id != 7
    {"id__in": [1, 2, 3]}            id in (1, 2, 3)
    {"name__ilike": "%ali%"}         case-insensitive LIKE
    {"generation__gte": 2}           generation >= 2
    {"death_date__is_null": True}    death_date is null
    {"generation__not_null": True}   generation is not null
"""
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from supabase import Client

from family_tree.core.exceptions import BackendError

logger = logging.getLogger(__name__)

Filters = Dict[str, Any]
Order = Union[str, Sequence[str], None]

# Characters with meaning inside a PostgREST or=(...) expression or an ilike pattern
_OR_RESERVED = str.maketrans({
    ",": " ", "(": " ", ")": " ", ".": " ", ":": " ",
    "%": " ", "_": " ", "*": " ", "\\": " ",
})


def sanitize_or_term(term: str) -> str:
    """Strip characters that would break an or=(...) expression or act as wildcards."""
    return " ".join(term.translate(_OR_RESERVED).split())


class Backend:
    def __init__(self, client: Client):
        self.client = client

    @property
    def auth(self):
        return self.client.auth

    def fetch_table(
        self,
        name: str,
        filters: Optional[Filters] = None,
        columns: str = "*",
        order: Order = None,
        desc: bool = False,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        any_of: Optional[List[Tuple[str, str]]] = None,
    ) -> List[Dict[str, Any]]:
        """Select rows from a table or view."""
        try:
            query = self.client.table(name).select(columns)
            query = self._apply_filters(query, filters)
            if any_of:
                query = query.or_(",".join(f"{column}.ilike.{pattern}" for column, pattern in any_of))
            for column in self._order_columns(order):
                query = query.order(column, desc=desc)
            if limit is not None:
                query = query.limit(limit)
            if offset is not None:
                query = query.offset(offset)
            result = query.execute()
        except Exception as e:
            logger.error(f"Error fetching {name}: {e}")
            raise BackendError("select", name, e) from e
        return result.data or []

    def fetch_one(self, name: str, filters: Filters, columns: str = "*") -> Optional[Dict[str, Any]]:
        """Return the first row matching filters, or None."""
        rows = self.fetch_table(name, filters, columns=columns, limit=1)
        return rows[0] if rows else None

    def count(self, name: str, filters: Optional[Filters] = None, column: str = "*") -> int:
        try:
            query = self.client.table(name).select(column, count="exact", head=True)
            query = self._apply_filters(query, filters)
            result = query.execute()
        except Exception as e:
            logger.error(f"Error counting {name}: {e}")
            raise BackendError("count", name, e) from e
        return result.count or 0

    def insert(self, name: str, values: Dict[str, Any]) -> Dict[str, Any]:
        try:
            result = self.client.table(name).insert(values).execute()
        except Exception as e:
            logger.error(f"Error inserting into {name}: {e}")
            raise BackendError("insert", name, e) from e
        if not result.data:
            raise BackendError("insert", name)
        return result.data[0]

    def upsert(self, name: str, rows: List[Dict[str, Any]], on_conflict: str) -> List[Dict[str, Any]]:
        """Insert rows, updating those whose on_conflict column already exists.

        Columns missing from a row take the column default, so rows without a
        primary key are inserted with a generated one.
        """
        try:
            result = self.client.table(name).upsert(
                rows, on_conflict=on_conflict, default_to_null=False
            ).execute()
        except Exception as e:
            logger.error(f"Error upserting into {name}: {e}")
            raise BackendError("upsert", name, e) from e
        return result.data or []

    def update(self, name: str, filters: Filters, values: Dict[str, Any]) -> List[Dict[str, Any]]:
        try:
            query = self._apply_filters(self.client.table(name).update(values), filters)
            result = query.execute()
        except Exception as e:
            logger.error(f"Error updating {name}: {e}")
            raise BackendError("update", name, e) from e
        return result.data or []

    def delete(self, name: str, filters: Filters) -> List[Dict[str, Any]]:
        try:
            query = self._apply_filters(self.client.table(name).delete(), filters)
            result = query.execute()
        except Exception as e:
            logger.error(f"Error deleting from {name}: {e}")
            raise BackendError("delete", name, e) from e
        return result.data or []

    def call_procedure(self, name: str, args: Optional[Dict[str, Any]] = None) -> Any:
        """Call a Postgres function exposed over RPC and return its result."""
        try:
            result = self.client.rpc(name, args or {}).execute()
        except Exception as e:
            logger.error(f"Error calling procedure {name}: {e}")
            raise BackendError("rpc", name, e) from e
        return result.data

    @staticmethod
    def _order_columns(order: Order) -> List[str]:
        if not order:
            return []
        if isinstance(order, str):
            return [order]
        return list(order)

    @staticmethod
    def _apply_filters(query, filters: Optional[Filters]):
        for key, value in (filters or {}).items():
            column, _, op = key.partition("__")
            op = op or "eq"
            if op == "eq":
                query = query.eq(column, value)
            elif op == "neq":
                query = query.neq(column, value)
            elif op == "in":
                query = query.in_(column, list(value))
            elif op == "ilike":
                query = query.ilike(column, value)
            elif op == "gte":
                query = query.gte(column, value)
            elif op == "lte":
                query = query.lte(column, value)
            elif op == "is_null":
                query = query.is_(column, "null") if value else query.not_.is_(column, "null")
            elif op == "not_null":
                query = query.not_.is_(column, "null") if value else query.is_(column, "null")
            else:
                raise ValueError(f"Unsupported filter operator: {op}")
        return query
