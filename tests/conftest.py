"""Pytest configuration and shared fixtures for FamilyFlow tests."""

import pytest

from familyflow import FamilyTreeLayout

from .helpers import child, make_nodes, spouse


@pytest.fixture
def engine():
    """Default FamilyTreeLayout instance (top-to-bottom)."""
    return FamilyTreeLayout()


@pytest.fixture
def chain_graph():
    """Three generations in a line: 1 -> 2 -> 3."""
    return make_nodes("1", "2", "3"), [child("1", "2"), child("2", "3")]


@pytest.fixture
def spouse_graph():
    """A couple with no children."""
    return make_nodes("A", "B"), [spouse("A", "B")]


@pytest.fixture
def family_graph():
    """
    Grandparents with two children, one of them married with two kids,
    plus an unrelated person.
    """
    nodes = make_nodes("gp", "gm", "dad", "mum", "aunt", "kid1", "kid2", "loner")
    edges = [
        spouse("gp", "gm"),
        child("gp", "dad"),
        child("gp", "aunt"),
        spouse("dad", "mum"),
        child("dad", "kid1"),
        child("dad", "kid2"),
    ]
    return nodes, edges
