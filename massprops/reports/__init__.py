"""Text reports over a kinematic tree."""

from .hierarchy import model_hierarchy
from .naming import dof_name, resolve_body_name
from .overview import dof_overview, named_body_origins

__all__ = [
    "dof_name",
    "dof_overview",
    "model_hierarchy",
    "named_body_origins",
    "resolve_body_name",
]
