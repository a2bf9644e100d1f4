from __future__ import annotations

from typing import Tuple


class MassPropsError(Exception):
    """Base class for errors raised by massprops."""


class GeneralizedVectorSizeError(MassPropsError, ValueError):
    def __init__(self, kind: str, expected: int, actual: int) -> None:
        self.kind = kind
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Mismatch between vectors creating generalized {kind} vector: "
            f"output has {actual} elements, expected {expected}"
        )


class DegenerateMassError(MassPropsError, ValueError):
    """Raised when an aggregate quantity is requested from a massless tree."""

    def __init__(self, mass: float) -> None:
        self.mass = mass
        super().__init__(f"Total mass must be positive, got {mass!r}")


class TreeStructureError(MassPropsError):
    """The kinematic tree violates a structural invariant."""


class VirtualBodyFanOutError(TreeStructureError):
    """A virtual body has more than one child, so its multi-DOF joint is ambiguous.

    ``children`` holds ``(id, name)`` pairs for the immediate children and
    ``partial`` the report text produced before the violation was found.
    """

    def __init__(
        self,
        body_id: int,
        name: str,
        children: Tuple[Tuple[int, str], ...],
        partial: str = "",
    ) -> None:
        self.body_id = body_id
        self.name = name
        self.children = children
        self.partial = partial
        lines = [
            f"Cannot determine multi-dof joint as massless body with id {body_id} "
            f"(name: {name}) has more than one child:"
        ]
        lines.extend(f"  id: {child_id} name: {child_name}" for child_id, child_name in children)
        super().__init__("\n".join(lines))
