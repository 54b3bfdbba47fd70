"""XML serialization of graphs.

Document layout::

    <graph>
      <vertex>A</vertex>
      <vertex>B</vertex>
      <arc>
        <from>A</from>
        <to>B</to>
        <order>0</order>
      </arc>
    </graph>
"""

from __future__ import annotations

import logging
import re

from lxml import etree

from ._errors import GraphCodecError
from ._model import Arc, Graph

logger = logging.getLogger(__name__)

_ORDER_PATTERN = re.compile(r"[+-]?[0-9]+")
_MIN_ORDER = -(2**31)
_MAX_ORDER = 2**31 - 1
_ARC_FIELDS = ("from", "to", "order")


def graph_to_xml(graph: Graph) -> str:
    """Encode a graph as an indented XML document without a declaration.

    Vertices and arcs are written in the graph's own order.
    """
    root = etree.Element("graph")
    for vertex in graph.vertices:
        etree.SubElement(root, "vertex").text = vertex
    for arc in graph.arcs:
        arc_element = etree.SubElement(root, "arc")
        etree.SubElement(arc_element, "from").text = arc.source
        etree.SubElement(arc_element, "to").text = arc.target
        etree.SubElement(arc_element, "order").text = str(arc.order)
    return etree.tostring(root, pretty_print=True, encoding="unicode")


def _local_name(element: etree._Element) -> str:
    if not isinstance(element.tag, str):
        msg = f"Unexpected XML node on line {element.sourceline}"
        raise GraphCodecError(msg)
    return etree.QName(element).localname


def _check_no_text(element: etree._Element) -> None:
    """Reject character data directly inside a container element."""
    chunks = [element.text, *(child.tail for child in element)]
    if any(chunk and chunk.strip() for chunk in chunks):
        msg = f"Unexpected text inside <{_local_name(element)}> on line {element.sourceline}"
        raise GraphCodecError(msg)


def _leaf_text(element: etree._Element) -> str:
    name = _local_name(element)
    if len(element):
        msg = f"<{name}> on line {element.sourceline} must not contain elements"
        raise GraphCodecError(msg)
    text = (element.text or "").strip()
    if not text:
        msg = f"<{name}> on line {element.sourceline} is empty"
        raise GraphCodecError(msg)
    return text


def _parse_order(text: str, line: int | None) -> int:
    if not _ORDER_PATTERN.fullmatch(text):
        msg = f"Arc order '{text}' on line {line} is not an integer"
        raise GraphCodecError(msg)
    order = int(text)
    if not _MIN_ORDER <= order <= _MAX_ORDER:
        msg = f"Arc order {order} on line {line} does not fit a 32-bit integer"
        raise GraphCodecError(msg)
    return order


def _decode_arc(element: etree._Element) -> Arc:
    _check_no_text(element)
    fields: dict[str, str] = {}
    for child in element:
        name = _local_name(child)
        if name not in _ARC_FIELDS:
            msg = f"Unexpected element <{name}> inside <arc> on line {child.sourceline}"
            raise GraphCodecError(msg)
        if name in fields:
            msg = f"Duplicate <{name}> inside <arc> on line {child.sourceline}"
            raise GraphCodecError(msg)
        fields[name] = _leaf_text(child)

    missing = [name for name in _ARC_FIELDS if name not in fields]
    if missing:
        msg = f"<arc> on line {element.sourceline} is missing: {', '.join(missing)}"
        raise GraphCodecError(msg)

    return Arc(
        source=fields["from"],
        target=fields["to"],
        order=_parse_order(fields["order"], element.sourceline),
    )


def graph_from_xml(data: str | bytes) -> Graph:
    """Decode an XML graph document.

    Vertices and arcs keep their document order; referential integrity is
    left to the node-table builder.

    Args:
        data: The XML document.

    Returns:
        The decoded Graph.

    Raises:
        GraphCodecError: If the document is malformed or does not follow the
            graph layout.

    """
    if isinstance(data, str):
        data = data.encode("utf-8")
    if not data.strip():
        msg = "Empty XML document"
        raise GraphCodecError(msg)

    parser = etree.XMLParser(
        resolve_entities=False,
        no_network=True,
        remove_comments=True,
        remove_pis=True,
    )
    try:
        root = etree.fromstring(data, parser)
    except etree.XMLSyntaxError as e:
        msg = f"Malformed XML: {e}"
        raise GraphCodecError(msg) from e

    if _local_name(root) != "graph":
        msg = f"Root element must be <graph>, found <{_local_name(root)}>"
        raise GraphCodecError(msg)
    _check_no_text(root)

    vertices: list[str] = []
    arcs: list[Arc] = []
    for child in root:
        match _local_name(child):
            case "vertex":
                vertices.append(_leaf_text(child))
            case "arc":
                arcs.append(_decode_arc(child))
            case name:
                msg = f"Unexpected element <{name}> inside <graph> on line {child.sourceline}"
                raise GraphCodecError(msg)

    logger.debug("Decoded %d vertices and %d arcs from XML", len(vertices), len(arcs))
    return Graph(vertices=tuple(vertices), arcs=tuple(arcs))
