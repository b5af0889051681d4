"""Storage for console variables."""

from __future__ import annotations

import enum
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

FLT_MAX = 3.4028234663852886e38
"""Largest finite single-precision float."""

CVAR_CAPACITY = 1000


class CVarType(enum.Enum):
    FLOAT = enum.auto()
    STRING = enum.auto()
    VEC3 = enum.auto()


@dataclass
class CVarParameters:
    """Description and location of a console variable."""

    index: int = 0
    type: CVarType = CVarType.FLOAT
    flags: int = 0
    name: str = ""
    description: str = ""


@dataclass
class CVarStorage:
    """The value of one console variable; numeric kinds also carry bounds."""

    initial: Any
    current: Any
    parameters: CVarParameters
    callback: Callable[[Any], None] | None = None
    min_value: Any = None
    max_value: Any = None


_ZERO = {CVarType.FLOAT: 0.0, CVarType.STRING: "", CVarType.VEC3: (0.0, 0.0, 0.0)}


def _unbounded(kind: CVarType) -> tuple[Any, Any]:
    if kind is CVarType.VEC3:
        return (-FLT_MAX,) * 3, (FLT_MAX,) * 3
    return -FLT_MAX, FLT_MAX


class CVarArray:
    """Fixed-capacity store of console variables of one kind."""

    def __init__(self, kind: CVarType, capacity: int = CVAR_CAPACITY) -> None:
        self.kind = kind
        self.capacity = capacity
        self._cvars: list[CVarStorage] = []
        self._lock = threading.Lock()

    def add(
        self,
        value: Any,
        params: CVarParameters,
        callback: Callable[[Any], None] | None = None,
        min_value: Any = None,
        max_value: Any = None,
    ) -> int:
        """Store a new variable, record its index in params and return it.

        Numeric variables with no bounds given (or both zero) are unbounded.
        """
        storage = CVarStorage(value, value, params, callback)
        if self.kind is not CVarType.STRING:
            zero = _ZERO[self.kind]
            lo = zero if min_value is None else min_value
            hi = zero if max_value is None else max_value
            if lo == zero and hi == zero:
                lo, hi = _unbounded(self.kind)
            storage.min_value = lo
            storage.max_value = hi

        with self._lock:
            index = len(self._cvars)
            if index >= self.capacity:
                raise OverflowError("CVar count exceeds storage capacity")
            self._cvars.append(storage)
        params.index = index
        return index

    def __getitem__(self, index: int) -> CVarStorage:
        return self._cvars[index]

    def __len__(self) -> int:
        return len(self._cvars)


@dataclass
class CVarSystemStorage:
    """All console variables, by kind, with their parameters."""

    float_cvars: CVarArray = field(default_factory=lambda: CVarArray(CVarType.FLOAT))
    string_cvars: CVarArray = field(default_factory=lambda: CVarArray(CVarType.STRING))
    vec3_cvars: CVarArray = field(default_factory=lambda: CVarArray(CVarType.VEC3))
    cvar_parameters: dict[Any, CVarParameters] = field(default_factory=dict)
    lock: threading.RLock = field(default_factory=threading.RLock)