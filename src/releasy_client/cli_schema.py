"""Schema describing important fields for CLI table rendering."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

Row = Mapping[str, Any]
ValueExtractor = Callable[[Row], Any]
ValueFormatter = Callable[[Any], str]
SortKey = Callable[[Row], Any]


@dataclass(frozen=True)
class Column:
    """Describe how to pull and format a column for Rich tables."""

    header: str
    keys: tuple[str, ...] = ()
    extractor: ValueExtractor | None = None
    formatter: ValueFormatter | None = None
    numeric: bool = False

    @property
    def justify(self) -> str:
        return "right" if self.numeric else "left"

    def value(self, row: Row) -> Any:
        present = (row[key] for key in self.keys if row.get(key) is not None)
        found = next(present, None)
        if found is None and self.extractor is not None:
            return self.extractor(row)
        return found

    def render(self, row: Row) -> str:
        value = self.value(row)
        if value is None:
            return ""
        return self.formatter(value) if self.formatter else str(value)


@dataclass(frozen=True)
class TableView:
    """Describe a Rich table for a CLI command."""

    title: str
    columns: tuple[Column, ...]
    sort_key: SortKey | None = None


def _timestamp_formatter(value: Any) -> str:
    # API timestamps are unix seconds
    if isinstance(value, bool) or not isinstance(value, int):
        return str(value)
    return datetime.fromtimestamp(value, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%SZ")


def _list_formatter(*, max_chars: int = 24, sep: str = ", ") -> ValueFormatter:
    def _formatter(value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, (list, tuple)):
            s = sep.join(str(v) for v in value)
        else:
            s = str(value)
        return s if len(s) <= max_chars else s[: max_chars - 1] + "…"

    return _formatter


def _artifact_count(row: Row) -> Any:
    artifacts = row.get("artifacts")
    if isinstance(artifacts, (list, tuple)):
        return len(artifacts)
    return None


def _newest_first(row: Row) -> int:
    created = row.get("created_at")
    return -created if isinstance(created, int) else 0


CLI_TABLE_VIEWS: dict[str, TableView] = {
    "customers.list": TableView(
        title="Customers",
        columns=(
            Column("Name", keys=("name",)),
            Column("Customer ID", keys=("id",)),
            Column("Plan", keys=("plan",)),
            Column("Created", keys=("created_at",), formatter=_timestamp_formatter),
            Column("Suspended", keys=("suspended_at",), formatter=_timestamp_formatter),
        ),
        sort_key=lambda row: str(row.get("name") or "").lower(),
    ),
    "users.list": TableView(
        title="Users",
        columns=(
            Column("Email", keys=("email",)),
            Column("User ID", keys=("id",)),
            Column("Customer ID", keys=("customer_id",)),
            Column("Status", keys=("status",)),
            Column("Groups", keys=("groups",), formatter=_list_formatter()),
        ),
        sort_key=lambda row: str(row.get("email") or "").lower(),
    ),
    "entitlements.list": TableView(
        title="Entitlements",
        columns=(
            Column("Product", keys=("product",)),
            Column("Entitlement ID", keys=("id",)),
            Column("Starts", keys=("starts_at",), formatter=_timestamp_formatter),
            Column("Ends", keys=("ends_at",), formatter=_timestamp_formatter),
        ),
        sort_key=lambda row: str(row.get("product") or "").lower(),
    ),
    "audit.list": TableView(
        title="Audit Events",
        columns=(
            Column("When", keys=("created_at",), formatter=_timestamp_formatter),
            Column("Actor", keys=("actor",)),
            Column("Event", keys=("event",)),
            Column("Customer ID", keys=("customer_id",)),
        ),
        sort_key=_newest_first,
    ),
    "releases.list": TableView(
        title="Releases",
        columns=(
            Column("Product", keys=("product",)),
            Column("Version", keys=("version",)),
            Column("Release ID", keys=("id",)),
            Column("Status", keys=("status",)),
            Column("Published", keys=("published_at",), formatter=_timestamp_formatter),
            Column("Artifacts", extractor=_artifact_count, numeric=True),
        ),
        sort_key=_newest_first,
    ),
}
