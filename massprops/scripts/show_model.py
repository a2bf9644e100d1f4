from __future__ import annotations

import argparse
import sys
from typing import Callable, Mapping, Sequence

import numpy as np

from massprops.analysis import CompositeAccumulator, kinetic_energy, potential_energy
from massprops.errors import DegenerateMassError, VirtualBodyFanOutError
from massprops.model import KinematicTree
from massprops.reports import dof_overview, model_hierarchy, named_body_origins
from massprops.samples import SAMPLE_TREES

GREEN = "\033[92m"
RED = "\033[91m"
YELLOW = "\033[93m"


def prompt_choice(
    prompt: str,
    options: Sequence[str],
    input_fn: Callable[[str], str] = input,
    print_fn: Callable[[str], None] = print,
) -> int:
    """Show a numbered menu of ``options`` and return the index picked.

    The answer may be the menu number or the option itself (case-insensitive).
    A single option is returned without asking.
    """

    if not options:
        raise ValueError("Nothing to choose from.")
    if len(options) == 1:
        return 0

    by_name = {option.lower(): index for index, option in enumerate(options)}
    print_fn(prompt)
    for number, option in enumerate(options, start=1):
        print_fn(f"  [{number}] {option}")
    while True:
        answer = input_fn(f"Choice [1-{len(options)}]: ").strip()
        if answer.lower() in by_name:
            return by_name[answer.lower()]
        if not answer.isdigit():
            print_fn(f"{answer!r} is neither a menu number nor a listed name.")
        elif not 1 <= int(answer) <= len(options):
            print_fn(f"No entry {answer}; pick a number from 1 to {len(options)}.")
        else:
            return int(answer) - 1


def resolve_sample_name(
    target: str | None,
    samples: Mapping[str, Callable[[], KinematicTree]],
    *,
    input_fn: Callable[[str], str] = input,
    print_fn: Callable[[str], None] = print,
) -> str:
    """Resolve a sample tree name, case-insensitively, or ask for one."""

    if target:
        name_lookup = {name.lower(): name for name in samples}
        key = target.lower()
        if key not in name_lookup:
            raise KeyError(f"Sample tree {target!r} not found; choose from {', '.join(samples)}.")
        return name_lookup[key]

    names = sorted(samples, key=str.lower)
    if not names:
        raise KeyError("No sample trees available.")
    index = prompt_choice("Select a sample tree:", names, input_fn=input_fn, print_fn=print_fn)
    return names[index]


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Print the hierarchy and mass properties of a sample kinematic tree."
    )
    parser.add_argument(
        "target",
        nargs="?",
        help=(
            "Sample tree name (e.g. 'floating_arm'). "
            "If omitted, an interactive selector will be shown."
        ),
    )
    parser.add_argument(
        "--q",
        type=float,
        nargs="*",
        default=None,
        help="Generalized positions; zero when omitted.",
    )
    parser.add_argument(
        "--qdot",
        type=float,
        nargs="*",
        default=None,
        help="Generalized velocities; zero when omitted.",
    )
    return parser.parse_args(argv)


def _colorize(text: str, code: str, use_color: bool) -> str:
    if not use_color:
        return text
    return f"{code}{text}\033[0m"


def _format_vector(values: np.ndarray) -> str:
    return " ".join(f"{float(value) + 0.0:.6g}" for value in values)


def print_mass_summary(
    tree: KinematicTree,
    q: np.ndarray,
    qdot: np.ndarray,
    print_fn: Callable[[str], None] = print,
    use_color: bool = False,
) -> None:
    accumulator = CompositeAccumulator(tree)
    try:
        result = accumulator.center_of_mass(
            q, qdot, with_velocity=True, with_angular_momentum=True
        )
    except DegenerateMassError as exc:
        print_fn("  " + _colorize(f"[WARN] {exc}", YELLOW, use_color))
        return

    print_fn(f"  mass: {result.mass:.6g}")
    print_fn(f"  com: {_format_vector(result.com)}")
    print_fn(f"  com velocity: {_format_vector(result.com_velocity)}")
    print_fn(f"  angular momentum: {_format_vector(result.angular_momentum)}")
    print_fn(f"  kinetic energy: {kinetic_energy(tree, q, qdot):.6g}")
    print_fn(f"  potential energy: {potential_energy(tree, q, accumulator=accumulator):.6g}")


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    use_color = sys.stdout.isatty()
    try:
        name = resolve_sample_name(args.target, SAMPLE_TREES)
    except KeyError as exc:
        print(f"Error: {exc.args[0]}", file=sys.stderr)
        sys.exit(1)

    tree = SAMPLE_TREES[name]()
    q = np.zeros(tree.q_size) if args.q is None else np.asarray(args.q)
    qdot = np.zeros(tree.qdot_size) if args.qdot is None else np.asarray(args.qdot)
    try:
        tree.update_kinematics(q, qdot)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    print(_colorize(f"{name} hierarchy:", GREEN, use_color))
    try:
        print(model_hierarchy(tree))
    except VirtualBodyFanOutError as exc:
        print(exc.partial, end="")
        print(_colorize(f"Error: {exc}", RED, use_color), file=sys.stderr)
        sys.exit(2)

    print(_colorize("DOF overview:", GREEN, use_color))
    print(dof_overview(tree))
    print(_colorize("Named body origins:", GREEN, use_color))
    print(named_body_origins(tree, q))
    print(_colorize("Mass properties:", GREEN, use_color))
    print_mass_summary(tree, q, qdot, use_color=use_color)


if __name__ == "__main__":
    main()
