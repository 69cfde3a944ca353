"""In-memory feature tree assembly, filtering and search.

Features are stored flat with a ``parent_id`` pointer. Trees are rebuilt per
query from an id -> node index; nothing here touches the database.

All traversals use explicit stacks so adversarially deep trees cannot hit the
interpreter recursion limit.
"""

from collections.abc import Callable, Hashable, Iterable, Iterator
from dataclasses import dataclass, field
from typing import Protocol

from src.featuretree.models.enums import StatusFilter


class TreeItem(Protocol):
    """Anything shaped like a stored feature (ORM row, API schema, client snapshot)."""

    @property
    def id(self) -> Hashable: ...

    @property
    def parent_id(self) -> Hashable | None: ...

    @property
    def title(self) -> str: ...

    @property
    def description(self) -> str | None: ...

    @property
    def is_completed(self) -> bool: ...

    @property
    def has_accounting(self) -> bool: ...

    @property
    def is_accounting_done(self) -> bool: ...


@dataclass
class FeatureNode[T: TreeItem]:
    feature: T
    children: list["FeatureNode[T]"] = field(default_factory=list)


def _walk[T: TreeItem](forest: list[FeatureNode[T]]) -> Iterator[FeatureNode[T]]:
    """Depth-first, parents before children, siblings in order."""
    stack = list(reversed(forest))
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def assemble_tree[T: TreeItem](features: Iterable[T]) -> list[FeatureNode[T]]:
    """Rebuild the parent -> children forest from a flat feature list.

    The input is expected pre-sorted by ``(order, created_at)``; sibling and
    root order follow input order. Features whose parent is missing become
    roots. Features caught in a stored parent loop (unreachable from any root)
    are detached from their parent and promoted to roots, in input order.
    """
    items = list(features)
    nodes: dict[Hashable, FeatureNode[T]] = {}
    for feature in items:
        nodes.setdefault(feature.id, FeatureNode(feature))

    roots: list[FeatureNode[T]] = []
    parents: dict[Hashable, FeatureNode[T]] = {}
    for feature in items:
        node = nodes[feature.id]
        if node.feature is not feature:
            continue  # duplicate id, first occurrence wins
        parent = nodes.get(feature.parent_id) if feature.parent_id is not None else None
        if parent is None:
            roots.append(node)
        else:
            parent.children.append(node)
            parents[feature.id] = parent

    reached = {node.feature.id for node in _walk(roots)}
    if len(reached) == len(nodes):
        return roots

    for feature in items:
        if feature.id in reached:
            continue
        node = nodes[feature.id]
        siblings = parents[feature.id].children
        del siblings[next(i for i, child in enumerate(siblings) if child is node)]
        roots.append(node)
        reached.update(n.feature.id for n in _walk([node]))

    return roots


def flatten[T: TreeItem](forest: list[FeatureNode[T]]) -> list[T]:
    """Features of a forest in depth-first order, parents before children."""
    return [node.feature for node in _walk(forest)]


_STATUS_PREDICATES: dict[StatusFilter, Callable[[TreeItem], bool]] = {
    StatusFilter.ALL: lambda f: True,
    StatusFilter.COMPLETED: lambda f: f.is_completed is True,
    StatusFilter.NOT_COMPLETED: lambda f: f.is_completed is not True,
    StatusFilter.WITH_ACCOUNTING: lambda f: f.has_accounting is True,
    StatusFilter.WITHOUT_ACCOUNTING: lambda f: f.has_accounting is not True,
    StatusFilter.ACCOUNTING_DONE: lambda f: f.is_accounting_done is True,
}


def feature_matches_status(feature: TreeItem, status: StatusFilter) -> bool:
    return _STATUS_PREDICATES[status](feature)


def filter_by_status[T: TreeItem](
    forest: list[FeatureNode[T]], status: StatusFilter
) -> list[FeatureNode[T]]:
    """Prune the forest to matching features and their ancestors.

    A node survives if it matches or any descendant survives. Returns new
    nodes; the input forest is left untouched.
    """
    if status is StatusFilter.ALL:
        return forest

    predicate = _STATUS_PREDICATES[status]
    kept: dict[int, FeatureNode[T]] = {}
    stack: list[tuple[FeatureNode[T], bool]] = [(node, False) for node in reversed(forest)]
    while stack:
        node, children_done = stack.pop()
        if not children_done:
            stack.append((node, True))
            stack.extend((child, False) for child in reversed(node.children))
            continue
        children = [kept[id(child)] for child in node.children if id(child) in kept]
        if predicate(node.feature) or children:
            kept[id(node)] = FeatureNode(node.feature, children)

    return [kept[id(node)] for node in forest if id(node) in kept]


def matches_search(feature: TreeItem, query: str) -> bool:
    needle = query.lower()
    if needle in feature.title.lower():
        return True
    return bool(feature.description) and needle in feature.description.lower()


def search[T: TreeItem](forest: list[FeatureNode[T]], query: str | None) -> list[FeatureNode[T]]:
    """Flatten the forest and keep only features matching ``query``.

    Search results are a flat list: each returned node has no children.
    An empty query returns the forest unchanged.
    """
    if not query:
        return forest
    return [FeatureNode(feature) for feature in flatten(forest) if matches_search(feature, query)]
