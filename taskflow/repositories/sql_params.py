"""
Positional bound parameters for hand-built task statements.

Placeholders are named ``:p1``, ``:p2``, ... in the order values are added,
so the Nth placeholder in a statement always binds the Nth value.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

TASKS_TABLE = "tasks"


@dataclass(frozen=True)
class BoundParam:
    """One positional value and the column whose type should bind it."""

    name: str
    value: Any
    column: Optional[str] = None

    @property
    def placeholder(self) -> str:
        return f":{self.name}"


class ParamList:
    """Left-to-right parameter counter shared by every clause of a statement."""

    def __init__(self) -> None:
        self._params: List[BoundParam] = []

    def add(self, value: Any, column: Optional[str] = None) -> str:
        """Append ``value`` and return the placeholder that binds it."""
        param = BoundParam(name=f"p{len(self._params) + 1}", value=value, column=column)
        self._params.append(param)
        return param.placeholder

    def snapshot(self) -> List[BoundParam]:
        return list(self._params)

    def __len__(self) -> int:
        return len(self._params)

    def __iter__(self) -> Iterator[BoundParam]:
        return iter(self._params)


@dataclass(frozen=True)
class BuiltStatement:
    """SQL text plus the parameters its placeholders refer to, in order."""

    sql: str
    params: List[BoundParam] = field(default_factory=list)

    def values(self) -> Dict[str, Any]:
        return {param.name: param.value for param in self.params}
