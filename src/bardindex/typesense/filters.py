"""Filter builder — Structured ``filter_by`` expressions for Typesense.

Filters are collected as clauses and serialized in one place, so ids coming
from the index are never spliced into the expression unquoted::

    FilterBuilder().one_of("act_id", ["hamlet-1", "hamlet-2"]).build()
    # 'act_id:=[`hamlet-1`,`hamlet-2`]'
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

_FIELD_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_.]*$")


class FilterOperator(str, Enum):
    """Supported filter operators."""

    EQUALS = "equals"
    ONE_OF = "one_of"


class FilterClause(BaseModel):
    """A single field predicate."""

    model_config = ConfigDict(frozen=True)

    field: str = Field(description="Document field the clause applies to")
    operator: FilterOperator = Field(description="Comparison operator")
    values: tuple[str, ...] = Field(description="Values compared against the field")

    def serialize(self) -> str:
        quoted = [f"`{v}`" for v in self.values]
        if self.operator is FilterOperator.EQUALS:
            return f"{self.field}:={quoted[0]}"
        return f"{self.field}:=[{','.join(quoted)}]"


class FilterBuilder:
    """Accumulates filter clauses and renders a Typesense ``filter_by`` string.

    All clauses are combined with ``&&``.
    """

    def __init__(self) -> None:
        self._clauses: list[FilterClause] = []

    def equals(self, field: str, value: str) -> FilterBuilder:
        """Add an exact-match clause (``field:=value``)."""
        self._clauses.append(
            FilterClause(field=_check_field(field), operator=FilterOperator.EQUALS, values=(_check_value(value),))
        )
        return self

    def one_of(self, field: str, values: Iterable[str]) -> FilterBuilder:
        """Add a set-membership clause (``field:=[a,b,...]``).

        Raises:
            ValueError: If ``values`` is empty or a value contains a backtick.
        """
        items = tuple(_check_value(v) for v in values)
        if not items:
            raise ValueError(f"Filter on '{field}' needs at least one value")
        self._clauses.append(FilterClause(field=_check_field(field), operator=FilterOperator.ONE_OF, values=items))
        return self

    @property
    def clauses(self) -> list[FilterClause]:
        return list(self._clauses)

    def build(self) -> str:
        return " && ".join(clause.serialize() for clause in self._clauses)

    def __str__(self) -> str:
        return self.build()


def _check_field(field: str) -> str:
    if not _FIELD_NAME.match(field):
        raise ValueError(f"Invalid filter field name: {field!r}")
    return field


def _check_value(value: str) -> str:
    # Typesense has no escape sequence for backticks inside a quoted value
    value = str(value)
    if "`" in value:
        raise ValueError(f"Filter value may not contain a backtick: {value!r}")
    return value
