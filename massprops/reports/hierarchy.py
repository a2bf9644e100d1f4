from __future__ import annotations

import logging
from typing import List, Tuple

from massprops.errors import VirtualBodyFanOutError
from massprops.model.tree import KinematicTree

from .naming import dof_name, resolve_body_name

logger = logging.getLogger(__name__)

_INDENT = "  "


def model_hierarchy(tree: KinematicTree) -> str:
    """Render the tree as an indented outline, one real body per line.

    Chains of virtual bodies are collapsed into the entry of the real body
    they lead to, listing one DOF label per chain link::

        ROOT
          base [ TX, TY, TZ, RZ, RY, RX ]
            arm [ RY ]
            sensor [fixed]

    Raises:
        VirtualBodyFanOutError: a virtual body has more than one child.
    """

    lines: List[str] = []
    # (kind, body index, indent); fixed markers run after the body's subtree.
    stack: List[Tuple[str, int, int]] = [("body", 0, 0)]
    while stack:
        kind, index, indent = stack.pop()
        if kind == "fixed":
            for _, fixed in tree.fixed_children_of(index):
                lines.append(f"{_INDENT * (indent + 1)}{fixed.name} [fixed]")
            continue

        name = resolve_body_name(tree, index)
        logger.debug("Body %d -> %s", index, name)
        index, labels = _collapse_virtual_chain(tree, index, lines)
        if labels is None:
            lines.append(f"{_INDENT * indent}{name}")
        else:
            lines.append(f"{_INDENT * indent}{name} [ {', '.join(labels)} ]")

        stack.append(("fixed", index, indent))
        for child in reversed(tree.children_of(index)):
            stack.append(("body", child, indent + 1))

    return "".join(f"{line}\n" for line in lines)


def _collapse_virtual_chain(
    tree: KinematicTree, index: int, lines: List[str]
) -> Tuple[int, List[str] | None]:
    if index == 0:
        return index, None

    labels: List[str] = []
    while tree.is_virtual(index):
        children = tree.children_of(index)
        if not children:
            labels.extend((dof_name(tree.joints[index].axes[0]), "end"))
            return index, labels
        if len(children) > 1:
            raise VirtualBodyFanOutError(
                body_id=index,
                name=tree.body_name(index),
                children=tuple((child, tree.body_name(child)) for child in children),
                partial="".join(f"{line}\n" for line in lines),
            )
        labels.append(dof_name(tree.joints[index].axes[0]))
        index = children[0]

    labels.append(dof_name(tree.joints[index].axes[0]))
    return index, labels
