from __future__ import annotations

from typing import Optional


class DiversityError(ValueError):
    """Base class for invalid input rejected by the diversity kernel."""


class InvalidDimension(DiversityError):
    def __init__(self, name: str, value: object, reason: str) -> None:
        self.name = name
        self.value = value
        super().__init__(f"{name}={value!r}: {reason}")


class NullBuffer(DiversityError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"{name} is None but the computation is non-empty")


class BufferTooSmall(DiversityError):
    def __init__(self, name: str, required: int, actual: int) -> None:
        self.name = name
        self.required = int(required)
        self.actual = int(actual)
        super().__init__(f"{name} holds {actual} elements, {required} required")


class InvalidCoverValue(DiversityError):
    """A cover element or a per-cell cover sum violates ``[0, 1 + delta]``.

    ``index`` is the raw input index for element errors (``g`` is set) and the
    output index ``t * n_locs + l`` for cell-sum errors (``g`` is None).
    """

    def __init__(
        self,
        reason: str,
        *,
        t: int,
        l: int,
        index: int,
        value: float,
        g: Optional[int] = None,
    ) -> None:
        self.reason = reason
        self.t = int(t)
        self.l = int(l)
        self.g = None if g is None else int(g)
        self.index = int(index)
        self.value = float(value)
        where = f"t={self.t}, l={self.l}" if self.g is None else f"t={self.t}, g={self.g}, l={self.l}"
        super().__init__(f"{reason} at {where} (index {self.index}): {self.value!r}")
