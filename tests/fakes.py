"""
In-memory stand-ins for the MongoDB database and the query translator.

FakeDatabase implements the slice of pymongo's AsyncDatabase the store uses:
item access to collections, find() with projection, cursor limit(),
async to_list(), list_collection_names(filter=...) and command("ping").
"""

import json
import re
from typing import Any, Dict, List, Optional

from app.translators import QueryTranslator


# ============================================================================
# FILTER MATCHING
# ============================================================================

def _candidates(value: Any) -> List[Any]:
    """Array fields match element-wise, like MongoDB."""
    if isinstance(value, list):
        return value
    return [value]


def _compare(value: Any, op: str, arg: Any) -> bool:
    if value is None:
        return False
    try:
        if op == "$gte":
            return value >= arg
        if op == "$gt":
            return value > arg
        if op == "$lte":
            return value <= arg
        if op == "$lt":
            return value < arg
    except TypeError:
        return False
    raise ValueError(f"Unsupported comparison: {op}")


def _match_operator(value: Any, op: str, arg: Any, options: str) -> bool:
    values = _candidates(value)

    if op == "$in":
        return any(v in arg for v in values)
    if op == "$nin":
        return not any(v in arg for v in values)
    if op == "$eq":
        return any(v == arg for v in values)
    if op == "$ne":
        return all(v != arg for v in values)
    if op == "$exists":
        return (value is not None) == bool(arg)
    if op == "$regex":
        flags = re.IGNORECASE if "i" in (options or "") else 0
        return any(isinstance(v, str) and re.search(arg, v, flags) for v in values)
    if op in ("$gte", "$gt", "$lte", "$lt"):
        return any(_compare(v, op, arg) for v in values)

    raise ValueError(f"Unsupported operator: {op}")


def _match_value(value: Any, condition: Any) -> bool:
    if isinstance(condition, dict) and condition and all(k.startswith("$") for k in condition):
        options = condition.get("$options", "")
        return all(
            _match_operator(value, op, arg, options)
            for op, arg in condition.items()
            if op != "$options"
        )
    return any(v == condition for v in _candidates(value)) or value == condition


def matches(document: Dict[str, Any], query: Dict[str, Any]) -> bool:
    """Evaluate a MongoDB filter against one document."""
    for key, condition in query.items():
        if key == "$or":
            if not any(matches(document, clause) for clause in condition):
                return False
        elif key == "$and":
            if not all(matches(document, clause) for clause in condition):
                return False
        elif not _match_value(document.get(key), condition):
            return False
    return True


def apply_projection(document: Dict[str, Any], projection: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Apply an inclusion or exclusion projection to one document."""
    if not projection:
        return dict(document)

    included = [key for key, flag in projection.items() if flag and key != "_id"]

    if projection.get("_id") == 1 and len(projection) == 1:
        return {"_id": document.get("_id")}

    if included:
        result = {key: document[key] for key in included if key in document}
        if projection.get("_id", 1) and "_id" in document:
            result["_id"] = document["_id"]
        return result

    hidden = {key for key, flag in projection.items() if not flag}
    return {key: value for key, value in document.items() if key not in hidden}


# ============================================================================
# FAKE DATABASE
# ============================================================================

class FakeCursor:
    """Lazy cursor; failures surface when the cursor is drained."""

    def __init__(self, documents: List[Dict[str, Any]], call: Dict[str, Any], error: Optional[Exception]):
        self._documents = documents
        self._call = call
        self._error = error

    def limit(self, n: int) -> "FakeCursor":
        self._call["limit"] = n
        return self

    async def to_list(self, length: Optional[int] = None) -> List[Dict[str, Any]]:
        if self._error is not None:
            raise self._error
        limit = self._call.get("limit") or 0
        documents = self._documents[:limit] if limit else self._documents
        return [dict(doc) for doc in documents]


class FakeCollection:
    def __init__(self, database: "FakeDatabase", name: str):
        self.database = database
        self.name = name

    def find(self, filter: Optional[Dict[str, Any]] = None, projection: Optional[Dict[str, Any]] = None):
        query = filter or {}
        call = {"collection": self.name, "filter": query, "projection": projection, "limit": None}
        self.database.find_calls.append(call)

        documents = [
            apply_projection(doc, projection)
            for doc in self.database.collections.get(self.name, [])
            if matches(doc, query)
        ]
        return FakeCursor(documents, call, self.database.errors.get(self.name))


class FakeDatabase:
    """
    Dict-backed database.

    Args:
        collections: Physical collection name → documents
        errors: Physical collection name → exception raised when reading it
        reachable: False makes ping fail
    """

    def __init__(
        self,
        collections: Dict[str, List[Dict[str, Any]]],
        errors: Optional[Dict[str, Exception]] = None,
        reachable: bool = True,
    ):
        self.collections = collections
        self.errors = errors or {}
        self.reachable = reachable
        self.find_calls: List[Dict[str, Any]] = []
        self.list_calls = 0

    def __getitem__(self, name: str) -> FakeCollection:
        return FakeCollection(self, name)

    async def list_collection_names(self, filter: Optional[Dict[str, Any]] = None) -> List[str]:
        self.list_calls += 1
        names = list(self.collections.keys())
        if filter and "name" in filter:
            return [name for name in names if name == filter["name"]]
        return names

    async def command(self, name: str) -> Dict[str, Any]:
        if not self.reachable:
            raise ConnectionError("server selection timeout")
        return {"ok": 1.0}

    def calls_on(self, name: str) -> List[Dict[str, Any]]:
        """Find calls made against one physical collection."""
        return [call for call in self.find_calls if call["collection"] == name]


class FakeClient:
    def __init__(self):
        self.closed = False

    async def close(self) -> None:
        self.closed = True


# ============================================================================
# FAKE TRANSLATOR
# ============================================================================

class FakeTranslator(QueryTranslator):
    """
    Scripted translator.

    Responses are keyed by collection hint. A dict is returned as JSON,
    a string as-is, and an exception is raised.
    """

    def __init__(self, responses: Optional[Dict[str, Any]] = None, default: Any = None):
        self.responses = responses or {}
        self.default = {} if default is None else default
        self.calls: List[Dict[str, str]] = []
        self.closed = False

    @property
    def model_id(self) -> str:
        return "fake-translator"

    async def translate(self, prompt: str, collection_hint: str, current_time: str) -> str:
        self.calls.append({"prompt": prompt, "collection_hint": collection_hint, "current_time": current_time})
        response = self.responses.get(collection_hint, self.default)
        if isinstance(response, Exception):
            raise response
        if isinstance(response, str):
            return response
        return json.dumps(response)

    async def close(self) -> None:
        self.closed = True
