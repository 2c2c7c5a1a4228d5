"""Small syntax helpers over program nodes."""

from __future__ import annotations

from declbundle.program.models import Node, NodeKind


def find_first_child(node: Node, kind: NodeKind) -> Node | None:
    """Depth-first search for the first descendant of the given kind."""
    for child in node.iter_descendants():
        if child.kind == kind:
            return child
    return None


def get_module_specifier(declaration: Node) -> Node | None:
    """String literal module specifier of an import/export declaration, if any."""
    specifier = declaration.module_specifier
    if specifier is None or specifier.kind != NodeKind.STRING_LITERAL or not specifier.text:
        return None
    return specifier


def is_relative_module_name(module_name: str) -> bool:
    """Whether a specifier is path-relative or rooted (never a package name)."""
    if module_name in (".", ".."):
        return True
    if module_name.startswith(("./", "../", "/", ".\\", "..\\", "\\")):
        return True
    # Windows drive paths such as C:/lib or C:\lib.
    return len(module_name) > 2 and module_name[1] == ":" and module_name[2] in "/\\"
