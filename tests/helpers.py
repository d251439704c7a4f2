"""Small graph builders shared by the test modules."""

from familyflow import Edge, EdgeKind, Node


def make_nodes(*ids):
    """Nodes with a name payload for each id."""
    return [Node(id=node_id, data={"name": f"Person {node_id}"}) for node_id in ids]


def child(source, target):
    return Edge(id=f"e{source}-{target}", source=source, target=target)


def spouse(source, target):
    return Edge(
        id=f"s{source}-{target}",
        source=source,
        target=target,
        kind=EdgeKind.PAIRING,
    )
