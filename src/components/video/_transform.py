"""
Transformation aggregation for the video component.

Folds the element's own transformation parameters and any declared child
transformations into one ordered chain of steps. Order matters: the
delivery service applies the steps in sequence.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from ._options import TRANSFORMATION_PARAMS, snake_case_keys
from .models import TransformationDeclaration

Step = dict[str, Any]


def transformation_params(options: Mapping[str, Any]) -> Step:
    """
    Pick the transformation parameters out of snake_case options.

    The ``transformation`` key itself is a chain, not a parameter, and is
    left out.
    """
    return {
        k: v
        for k, v in options.items()
        if k in TRANSFORMATION_PARAMS and k != "transformation" and v is not None
    }


def explicit_chain(value: Any) -> list[Step]:
    """
    Steps from a ``transformation`` option given directly by the caller.

    Accepts a single mapping, a list of mappings, or a named transformation
    string.
    """
    if not value:
        return []
    if isinstance(value, str):
        return [{"transformation": value}]
    if isinstance(value, Mapping):
        value = [value]

    steps: list[Step] = []
    for item in value:
        if isinstance(item, str):
            steps.append({"transformation": item})
        else:
            step = snake_case_keys(item)
            if step:
                steps.append(step)
    return steps


def flatten_declaration(declaration: TransformationDeclaration) -> list[Step]:
    """Nested children first, then the declaration's own parameters."""
    steps: list[Step] = []
    for child in declaration.children:
        steps.extend(flatten_declaration(child))

    params = snake_case_keys(declaration.params)
    steps.extend(explicit_chain(params.get("transformation")))
    own = transformation_params(params)
    if own:
        steps.append(own)
    return steps


def aggregate_transformations(
    provider_options: Mapping[str, Any],
    children: Iterable[TransformationDeclaration] = (),
) -> list[Step]:
    """
    Build the element-level transformation chain.

    Order: the caller's explicit ``transformation`` chain, then each child
    declaration in declaration order, then the element's own parameters as
    the final step. Empty steps are dropped; an empty list means no
    transformation.
    """
    steps = explicit_chain(provider_options.get("transformation"))
    for child in children:
        steps.extend(flatten_declaration(child))

    own = transformation_params(provider_options)
    if own:
        steps.append(own)
    return steps
