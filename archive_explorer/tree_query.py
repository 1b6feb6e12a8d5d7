from __future__ import annotations

from dataclasses import replace
from typing import Optional, Tuple

from .nodes import Node


def search_tree(node: Node, query: str) -> Optional[Node]:
    """Case-insensitive name search that prunes folders left without matches.

    Returns a new tree, or None when nothing under `node` matches.
    """
    needle = (query or '').lower()

    if not node.is_folder:
        return node if needle in node.name.lower() else None

    children = []
    for child in node.children:
        kept = search_tree(child, query)
        if kept is not None:
            children.append(kept)
    if not children:
        return None
    return replace(node, children=children)


def _sort_key(key: str):
    if key == 'createdAt':
        return lambda n: n.created_at
    if key == 'name':
        return lambda n: n.name
    raise ValueError(f"Unknown sort key: {key}")


def sort_tree(node: Node, key: str = 'name') -> Node:
    """Recursively order children folders first, each group by `key`."""
    if not node.is_folder:
        return node

    by_key = _sort_key(key)
    children = [sort_tree(child, key) for child in node.children]
    folders = sorted((c for c in children if c.is_folder), key=by_key)
    files = sorted((c for c in children if not c.is_folder), key=by_key)
    return replace(node, children=folders + files)


def filter_and_sort_tree(node: Node, query: str, key: str = 'name') -> Optional[Node]:
    if not query:
        return sort_tree(node, key)
    found = search_tree(node, query)
    if found is None:
        return None
    return sort_tree(found, key)


def count_files(node: Optional[Node]) -> int:
    if node is None:
        return 0
    if not node.is_folder:
        return 1
    return sum(count_files(child) for child in node.children)


def tree_stats(node: Node) -> Tuple[int, int]:
    """(files, folders) below `node`, not counting `node` itself."""
    if not node.is_folder:
        return 1, 0
    files = 0
    folders = 0
    for child in node.children:
        child_files, child_folders = tree_stats(child)
        files += child_files
        folders += child_folders + (1 if child.is_folder else 0)
    return files, folders


def find_node(node: Node, path: str) -> Optional[Node]:
    if node.path == path:
        return node
    if not node.is_folder:
        return None
    for child in node.children:
        if child.path == path or path.startswith(f"{child.path}/"):
            found = find_node(child, path)
            if found is not None:
                return found
    return None

