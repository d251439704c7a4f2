#!/usr/bin/env python3
"""
Demo script for FamilyFlow.

Lays out the starter templates and a small edited family in both directions
and prints where everyone ends up.
"""

import logging

from familyflow import FamilyTree, FamilyTreeLayout, load_template, template_names


def print_header(title):
    """Print a formatted header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70 + "\n")


def print_positions(nodes):
    for node in nodes:
        print(f"  {node.name or node.id:<22} ({node.position.x:7.1f}, {node.position.y:7.1f})")


def demo_templates():
    """Demo 1: Starter templates, top-to-bottom"""
    engine = FamilyTreeLayout()
    for name in template_names():
        print_header(f"Template: {name}")
        document = load_template(name)
        nodes, _ = engine.layout(document.nodes, document.edges)
        print_positions(nodes)


def demo_editing():
    """Demo 2: Building a family and toggling direction"""
    print_header("Editing: add relatives, then switch to left-to-right")

    tree = FamilyTree()
    ada = tree.add_person("Ada")
    tree.add_spouse(ada.id, name="William")
    tree.add_child(ada.id, name="Byron")
    tree.add_child(ada.id, name="Anne")
    tree.add_parent(ada.id, name="Annabella")

    print("Top-to-bottom:")
    print_positions(tree.nodes)

    tree.relayout("LR")
    print("\nLeft-to-right:")
    print_positions(tree.nodes)


def demo_trace():
    """Demo 3: Debug trace of a layout run"""
    print_header("Debug trace")

    document = load_template("Smith Family")
    result = FamilyTreeLayout().compute(document.nodes, document.edges, debug=True)
    print(result.trace.dump())


def main():
    logging.basicConfig(level=logging.INFO)
    demo_templates()
    demo_editing()
    demo_trace()


if __name__ == "__main__":
    main()
