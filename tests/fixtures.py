"""
Test fixtures for CodeView.

This module provides sample graph documents and helpers for building
small models in tests.
"""

import json
from pathlib import Path

from codeview.graph import GraphModel
from codeview.loader import parse_document


def node_record(node_id, node_type="Function", name=None, **extra):
    """Build one node record in the document format."""
    record = {
        "id": node_id,
        "name": name or node_id.split("::")[-1],
        "node_type": node_type,
        "file_path": "src/lib.rs",
        "line_range": [1, 10],
        "content": f"fn {node_id}() {{}}",
    }
    record.update(extra)
    return record


def edge(to_id, relationship_type="Calls", **extra):
    """Build one outgoing edge entry in the document format."""
    return {"to_id": to_id, "relationship_type": relationship_type, **extra}


# Small document exercising every node field
SAMPLE_DOCUMENT = {
    "nodes": {
        "lib::Widget": node_record(
            "lib::Widget",
            "Class",
            summary="A UI widget",
            metadata={"visibility": "pub", "derive": "Debug"},
            content="struct Widget { size: u32 }",
            line_range=[3, 5],
        ),
        "lib::Widget::render": node_record("lib::Widget::render", "Method", name="render"),
        "lib::main": node_record("lib::main", "Function", name="main"),
        "lib::helper": node_record("lib::helper", "Function", name="helper"),
        "lib::MAX": node_record("lib::MAX", "Constant", name="MAX"),
    },
    "outgoing_edges": {
        "lib::Widget": [edge("lib::Widget::render", "Contains")],
        "lib::main": [
            edge("lib::Widget::render", "Calls"),
            edge("lib::helper", "Calls"),
            edge("lib::MAX", "References"),
        ],
        "lib::helper": [edge("lib::MAX", "References")],
    },
}

# A(Class), B(Function), C(Class); A contains B and C
FILTER_DOCUMENT = {
    "nodes": {
        "A": node_record("A", "Class"),
        "B": node_record("B", "Function"),
        "C": node_record("C", "Class"),
    },
    "outgoing_edges": {
        "A": [edge("B", "Contains"), edge("C", "Contains")],
    },
}


def build_model(document=None) -> GraphModel:
    """Parse a document dict (SAMPLE_DOCUMENT by default)."""
    return parse_document(document if document is not None else SAMPLE_DOCUMENT)


def write_document(directory: Path, document=None, name: str = "code_graph.json") -> Path:
    """Write a document dict as JSON and return its path."""
    path = Path(directory) / name
    path.write_text(json.dumps(document if document is not None else SAMPLE_DOCUMENT))
    return path
