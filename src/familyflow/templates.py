"""
Starter family trees.

``DEFAULT_TREE`` is the four-generation tree a new family starts from; the
named templates can be loaded from the family selector.
"""

from typing import Dict, List, Tuple

from .document import FamilyDocument
from .editing import edge_metadata
from .models import Edge, EdgeKind, Node

# (id, name, details)
_People = List[Tuple[str, str, str]]
# (source, target)
_Links = List[Tuple[str, str]]

DEFAULT_TREE = "Default"

_TEMPLATES: Dict[str, Tuple[_People, _Links]] = {
    DEFAULT_TREE: (
        [
            ("1", "Great Grandparent", "Generation 1"),
            ("2", "Grandparent A", "Generation 2"),
            ("3", "Grandparent B", "Generation 2"),
            ("4", "Parent A", "Generation 3"),
            ("5", "Parent B", "Generation 3"),
            ("6", "Child A", "Generation 4"),
            ("7", "Child B", "Generation 4"),
            ("8", "Child C", "Generation 4"),
        ],
        [
            ("1", "2"),
            ("1", "3"),
            ("2", "4"),
            ("3", "5"),
            ("4", "6"),
            ("4", "7"),
            ("5", "8"),
        ],
    ),
    "Smith Family": (
        [
            ("1", "John Smith Sr.", "Patriarch"),
            ("2", "Mary Smith", "Matriarch"),
            ("3", "John Smith Jr.", "Son"),
            ("4", "Sarah Smith", "Daughter"),
        ],
        [("1", "3"), ("2", "3"), ("1", "4"), ("2", "4")],
    ),
    "Johnson Family": (
        [
            ("1", "Robert Johnson", "Grandfather"),
            ("2", "Michael Johnson", "Father"),
            ("3", "Emily Johnson", "Daughter"),
        ],
        [("1", "2"), ("2", "3")],
    ),
}


def template_names() -> List[str]:
    return list(_TEMPLATES)


def load_template(name: str) -> FamilyDocument:
    """
    Build a fresh copy of a template.

    Raises:
        KeyError: If there is no template with that name.
    """
    if name not in _TEMPLATES:
        raise KeyError(f"Unknown template {name!r}, expected one of {template_names()}")

    people, links = _TEMPLATES[name]
    nodes = [
        Node(id=node_id, data={"name": person, "details": details})
        for node_id, person, details in people
    ]
    edges = [
        Edge(
            id=f"e{source}-{target}",
            source=source,
            target=target,
            kind=EdgeKind.HIERARCHY,
            metadata=edge_metadata(EdgeKind.HIERARCHY),
        )
        for source, target in links
    ]
    family_name = None if name == DEFAULT_TREE else name
    return FamilyDocument(nodes=nodes, edges=edges, name=family_name)
