"""
Graph Document Loader for CodeView

This module fetches the JSON document written by the graph-construction
pipeline and turns it into a GraphModel.

Document shape:
    {
      "nodes": {"<id>": {"id", "name", "node_type", "file_path",
                         "line_range": [start, end], "content",
                         "summary"?, "metadata"?}},
      "outgoing_edges": {"<from_id>": [{"to_id", "relationship_type",
                                        "metadata"?}]}
    }

Failure policy:
    - Transport, HTTP, and file errors raise FetchError
    - A document that is not JSON or lacks the mappings above raises ParseError
    - A record missing a required field is skipped with a warning
    - Links whose endpoint is not a loaded node are dropped with a warning
    - Duplicate node ids: the last record wins
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Mapping, Optional

import httpx

from codeview.errors import FetchError, ParseError, PreconditionError
from codeview.graph import GraphModel
from codeview.models import LineRange, Link, LinkType, Node, NodeType

logger = logging.getLogger(__name__)

REQUIRED_NODE_FIELDS = ("name", "file_path", "line_range", "content")


def is_url(location: str) -> bool:
    """Check whether a document location is an HTTP(S) URL."""
    return location.startswith(("http://", "https://"))


async def fetch_document(
    location: str,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    """
    Retrieve the raw text of a graph document.

    No timeout is imposed; the caller stays inert until this resolves.

    Args:
        location: Filesystem path or http(s) URL
        transport: Optional httpx transport (used to stub the network)

    Returns:
        The document text

    Raises:
        FetchError: If the document cannot be retrieved
    """
    if is_url(location):
        try:
            async with httpx.AsyncClient(timeout=None, transport=transport) as client:
                response = await client.get(location)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise FetchError(location, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise FetchError(location, str(e) or type(e).__name__) from e
        return response.text

    try:
        return await asyncio.to_thread(Path(location).read_text, encoding="utf-8")
    except (OSError, UnicodeDecodeError, ValueError) as e:
        raise FetchError(location, str(e)) from e


async def load_document(
    location: str,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> GraphModel:
    """
    Fetch and parse a graph document.

    Args:
        location: Filesystem path or http(s) URL
        transport: Optional httpx transport (used to stub the network)

    Returns:
        A GraphModel with all valid nodes and links

    Raises:
        FetchError: If the document cannot be retrieved
        ParseError: If the document is malformed
    """
    text = await fetch_document(location, transport=transport)
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseError(f"{location} is not valid JSON: {e}") from e
    model = parse_document(payload)
    logger.info(
        "Loaded %d nodes and %d links from %s",
        model.node_count,
        model.link_count,
        location,
    )
    return model


def parse_document(payload: Any) -> GraphModel:
    """
    Build a GraphModel from a decoded graph document.

    Args:
        payload: The decoded JSON value

    Returns:
        A GraphModel with all valid nodes and links

    Raises:
        ParseError: If the top-level structure is not as expected
    """
    if not isinstance(payload, Mapping):
        raise ParseError("Graph document must be a JSON object")

    raw_nodes = payload.get("nodes")
    if not isinstance(raw_nodes, Mapping):
        raise ParseError("Graph document has no 'nodes' mapping")

    raw_edges = payload.get("outgoing_edges", {})
    if raw_edges is None:
        raw_edges = {}
    if not isinstance(raw_edges, Mapping):
        raise ParseError("'outgoing_edges' must be a mapping")

    nodes: dict[str, Node] = {}
    for key, record in raw_nodes.items():
        try:
            node = parse_node(key, record)
        except PreconditionError as e:
            logger.warning("Skipping node: %s", e)
            continue
        if node.id in nodes:
            logger.debug("Duplicate node id %r, keeping the later record", node.id)
        nodes[node.id] = node

    model = GraphModel()
    for node in nodes.values():
        model.add_node(node)

    dropped = 0
    for source, entries in raw_edges.items():
        if not isinstance(entries, list):
            logger.warning("Skipping edges of %r: expected a list", source)
            continue
        for entry in entries:
            try:
                link = parse_link(source, entry)
            except PreconditionError as e:
                logger.warning("Skipping edge: %s", e)
                continue
            if link.source not in model or link.target not in model:
                dropped += 1
                logger.debug("Dropping dangling link %s -> %s", link.source, link.target)
                continue
            model.add_link(link)

    if dropped:
        logger.warning("Dropped %d link(s) with an unknown endpoint", dropped)

    return model


def parse_node(key: str, record: Any) -> Node:
    """
    Build a Node from one entry of the 'nodes' mapping.

    Args:
        key: The mapping key (used as id when the record has none)
        record: The node record

    Returns:
        The parsed Node

    Raises:
        PreconditionError: If a required field is missing or malformed
    """
    if not isinstance(record, Mapping):
        raise PreconditionError(key, "record", "is not an object")

    node_id = record.get("id") or key
    if not isinstance(node_id, str):
        raise PreconditionError(key, "id", "is not a string")

    for name in REQUIRED_NODE_FIELDS:
        if record.get(name) is None:
            raise PreconditionError(node_id, name)

    line_range = _parse_line_range(node_id, record["line_range"])

    metadata = record.get("metadata") or {}
    if not isinstance(metadata, Mapping):
        logger.debug("Ignoring non-object metadata on %r", node_id)
        metadata = {}

    summary = record.get("summary")

    return Node(
        id=node_id,
        name=str(record["name"]),
        type=NodeType.parse(record.get("node_type")),
        file_path=str(record["file_path"]),
        line_range=line_range,
        content=str(record["content"]),
        summary=str(summary) if summary is not None else None,
        metadata={str(k): str(v) for k, v in metadata.items()},
    )


def parse_link(source: str, entry: Any) -> Link:
    """
    Build a Link from one entry of an 'outgoing_edges' list.

    Args:
        source: The origin node id (the mapping key)
        entry: The relationship record

    Raises:
        PreconditionError: If 'to_id' is missing
    """
    if not isinstance(entry, Mapping):
        raise PreconditionError(source, "edge", "is not an object")

    target = entry.get("to_id")
    if not isinstance(target, str):
        raise PreconditionError(source, "to_id")

    metadata = entry.get("metadata") or {}
    if not isinstance(metadata, Mapping):
        metadata = {}

    return Link(
        source=source,
        target=target,
        type=LinkType.parse(entry.get("relationship_type")),
        metadata={str(k): str(v) for k, v in metadata.items()},
    )


def _parse_line_range(node_id: str, value: Any) -> LineRange:
    """Parse a [start, end] pair."""
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise PreconditionError(node_id, "line_range", "is not a [start, end] pair")
    try:
        return LineRange(int(value[0]), int(value[1]))
    except (TypeError, ValueError) as e:
        raise PreconditionError(node_id, "line_range", str(e)) from e
