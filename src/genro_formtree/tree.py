# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Tree operations - navigation, lookup, persistent update and JSON.

Nodes are addressed in two ways:

- **Index paths**: tuples of positions, one per level. A position indexes a
  group's children or a repeatable's instances. ``()`` is the root itself.
- **Identifiers**: the ``identifier`` attribute. Lookups by identifier
  always traverse the whole tree and report absence or ambiguity instead of
  picking a match.

The JSON projection is keyed by the ``name`` attribute, never by
identifier: identifiers are application values that need not serialize.

Example:
    >>> form = group(
    ...     text(name='street', identifier='street'),
    ...     group(text(name='zip', identifier='zip'), name='city'),
    ... )
    >>> get_at(form, (1, 0)).name
    'zip'
    >>> result = update_with_id(form, 'zip', lambda leaf: leaf.with_text('20100'))
    >>> to_json(result.value)
    {'street': None, 'city': {'zip': '20100'}}
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterator

from .errors import Ambiguous, NotFound, StructureMismatch
from .field import Field, Group, Leaf, Repeatable
from .result import Err, Ok, Result
from .values import from_python
from .values import to_json as value_to_json

logger = logging.getLogger(__name__)

Path = tuple[int, ...]


# ==================== Navigation ====================

def children_of(node: Field) -> tuple[Field, ...]:
    """Live children: group children or repeatable instances."""
    if isinstance(node, Group):
        return node.children
    if isinstance(node, Repeatable):
        return node.instances
    return ()


def _with_children(node: Field, children: tuple[Field, ...]) -> Field:
    if isinstance(node, Group):
        return node.with_children(children)
    if isinstance(node, Repeatable):
        return node.with_instances(children)
    raise KeyError(f"{node!r} is a leaf, it has no children")


def walk(tree: Field, _prefix: Path = ()) -> Iterator[tuple[Path, Field]]:
    """Yield ``(path, node)`` for every live node, depth first.

    The root is yielded first with path ``()``. Repeatable templates are
    not live and are not visited.

    Example:
        >>> for path, node in walk(form):
        ...     print(path, node.name)
    """
    yield _prefix, tree
    for index, child in enumerate(children_of(tree)):
        yield from walk(child, _prefix + (index,))


def leaves(tree: Field) -> Iterator[tuple[Path, Leaf]]:
    """Yield ``(path, leaf)`` for every live leaf, in document order."""
    for path, node in walk(tree):
        if isinstance(node, Leaf):
            yield path, node


def get_at(tree: Field, path: Path) -> Field:
    """Get the node at an index path.

    Raises:
        KeyError: If the path does not exist.
    """
    node = tree
    for depth, index in enumerate(path):
        children = children_of(node)
        if not 0 <= index < len(children):
            raise KeyError(
                f"Position #{index} out of range at {path[:depth]} "
                f"({len(children)} children)"
            )
        node = children[index]
    return node


def update_at(tree: Field, path: Path, transform: Callable[[Field], Field]) -> Field:
    """Return a new tree with ``transform`` applied to the node at ``path``.

    Only the nodes along the path are rebuilt; every other subtree is
    carried over unchanged.

    Raises:
        KeyError: If the path does not exist.
    """
    if not path:
        return transform(tree)
    index, rest = path[0], path[1:]
    children = children_of(tree)
    if not 0 <= index < len(children):
        raise KeyError(f"Position #{index} out of range ({len(children)} children)")
    updated = update_at(children[index], rest, transform)
    return _with_children(
        tree, children[:index] + (updated,) + children[index + 1:]
    )


def replace_at(tree: Field, path: Path, node: Field) -> Field:
    """Return a new tree with the node at ``path`` replaced."""
    return update_at(tree, path, lambda _: node)


# ==================== Identifier lookup ====================

def find_paths(tree: Field, identifier: Any) -> list[Path]:
    """Return the paths of all live nodes carrying ``identifier``."""
    return [
        path for path, node in walk(tree)
        if node.identifier is not None and node.identifier == identifier
    ]


def find_with_id(tree: Field, identifier: Any) -> Result:
    """Resolve ``identifier`` to a single path.

    Returns:
        ``Ok(path)``, ``Err(NotFound(id))`` or ``Err(Ambiguous(id, count))``.
    """
    paths = find_paths(tree, identifier)
    if len(paths) == 1:
        return Ok(paths[0])
    if not paths:
        logger.debug("identifier %r not found", identifier)
        return Err(NotFound(identifier))
    logger.debug("identifier %r is ambiguous: %d matches", identifier, len(paths))
    return Err(Ambiguous(identifier, len(paths)))


def get_with_id(tree: Field, identifier: Any) -> Result:
    """Return ``Ok(node)`` for the unique node carrying ``identifier``."""
    return find_with_id(tree, identifier).map(lambda path: get_at(tree, path))


def update_with_id(
    tree: Field, identifier: Any, transform: Callable[[Field], Field]
) -> Result:
    """Apply ``transform`` to the unique node carrying ``identifier``.

    Returns:
        ``Ok(new_tree)``, or ``Err(NotFound)`` / ``Err(Ambiguous)``. Two
        nodes sharing the identifier are never resolved to the first one.
    """
    return find_with_id(tree, identifier).map(
        lambda path: update_at(tree, path, transform)
    )


def map_ids(tree: Field, func: Callable[[Any], Any]) -> Field:
    """Rewrap every identifier in a subtree through ``func``.

    The shape, values and other attributes are preserved. Repeatable
    templates are rewrapped too, so future instances carry the new
    identifiers. This is how an independently authored sub-form is nested
    into a parent form whose identifiers are of a different type.

    Example:
        >>> nested = map_ids(address_form, lambda inner: ('address', inner))
    """
    if tree.identifier is not None:
        tree = tree.set_attr(identifier=func(tree.identifier))
    if isinstance(tree, Group):
        return tree.with_children(tuple(map_ids(c, func) for c in tree.children))
    if isinstance(tree, Repeatable):
        return Repeatable(
            tree.attrs,
            map_ids(tree.template, func),
            tuple(map_ids(i, func) for i in tree.instances),
        )
    return tree


# ==================== Repeatables ====================

def add_instance(node: Repeatable) -> Repeatable:
    """Append a template clone; a no-op at max."""
    return node.add()


def remove_instance(node: Repeatable, index: int = -1) -> Repeatable:
    """Remove the instance at ``index``; a no-op at min."""
    return node.remove(index)


# ==================== JSON ====================

def to_json(tree: Field) -> Any:
    """Project the tree's values to JSON-compatible data keyed by ``name``.

    - Leaves become their value (datetimes as ISO strings).
    - Groups become objects. A child without a name is skipped, unless it is
      a group, whose entries are merged into the parent object.
    - Repeatables become arrays of their instances.
    """
    if isinstance(tree, Leaf):
        return value_to_json(tree.value)
    if isinstance(tree, Repeatable):
        return [to_json(instance) for instance in tree.instances]
    result: dict[str, Any] = {}
    for child in tree.children:
        if child.name is not None:
            result[child.name] = to_json(child)
        elif isinstance(child, Group):
            result.update(to_json(child))
    return result


def update_values_from_json(tree: Field, data: Any) -> Result:
    """Hydrate the tree's values from JSON-compatible data keyed by ``name``.

    Keys with no matching field are ignored. Fields with no matching key
    keep their value. Arrays resize repeatables, clamped to their bounds.

    Returns:
        ``Ok(new_tree)``, or ``Err(StructureMismatch)`` when the data shape
        does not fit the tree (e.g. an array where an object is expected).

    Example:
        >>> update_values_from_json(form, {'city': {'zip': '10121'}}).value
    """
    return _hydrate(tree, data, ())


def _type_name(data: Any) -> str:
    if isinstance(data, dict):
        return 'object'
    if isinstance(data, (list, tuple)):
        return 'array'
    return type(data).__name__


def _hydrate(node: Field, data: Any, path: tuple) -> Result:
    if isinstance(node, Leaf):
        if isinstance(data, dict):
            return Err(StructureMismatch(path, 'value', 'object'))
        if isinstance(data, str):
            return Ok(node.with_text(data))
        if isinstance(data, (list, tuple)) and any(isinstance(v, dict) for v in data):
            return Err(StructureMismatch(path, 'value', 'array of objects'))
        return Ok(node.with_value(from_python(data)))

    if isinstance(node, Repeatable):
        if not isinstance(data, (list, tuple)):
            return Err(StructureMismatch(path, 'array', _type_name(data)))
        count = len(data)
        if node.max_count is not None and count > node.max_count:
            logger.debug("%r: %d items clamped to max %d", node, count, node.max_count)
            count = node.max_count
        instances = []
        for index in range(count):
            base = node.instances[index] if index < len(node.instances) else node.new_instance()
            result = _hydrate(base, data[index], path + (index,))
            if result.is_err:
                return result
            instances.append(result.value)
        # below min, keep existing instances (or fresh ones) to stay in bounds
        while len(instances) < node.min_count:
            index = len(instances)
            instances.append(
                node.instances[index] if index < len(node.instances) else node.new_instance()
            )
        return Ok(node.with_instances(instances))

    if not isinstance(data, dict):
        return Err(StructureMismatch(path, 'object', _type_name(data)))
    known: set[str] = set()
    children = []
    for child in node.children:
        if child.name is not None:
            known.add(child.name)
            if child.name not in data:
                children.append(child)
                continue
            result = _hydrate(child, data[child.name], path + (child.name,))
        elif isinstance(child, Group):
            known.update(_merged_names(child))
            result = _hydrate(child, data, path)
        else:
            children.append(child)
            continue
        if result.is_err:
            return result
        children.append(result.value)
    for key in data.keys() - known:
        logger.debug("ignoring unknown key %r at %s", key, path)
    return Ok(node.with_children(children))


def _merged_names(node: Group) -> set[str]:
    """Names an unnamed group contributes to its parent object."""
    names: set[str] = set()
    for child in node.children:
        if child.name is not None:
            names.add(child.name)
        elif isinstance(child, Group):
            names.update(_merged_names(child))
    return names
