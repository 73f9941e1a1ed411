"""
schema_model.py

Builds the in-memory Schema Model from a parsed XSD tree.

The model captures what the validators need and nothing more:
1. complex_type_order - expected child element order per complex type
2. simple_types       - base type + restriction facets per simple type
3. attributes         - declared attributes per owning element
4. element_types      - declared type per element name

Unsupported constructs (choice, any, group, import, ...) are collected in
``unknown_elements`` instead of failing the walk.
"""

import logging
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from .errors import SchemaMalformedError
from .xml_loader import is_element, iter_children, local_name, strip_prefix

logger = logging.getLogger(__name__)

# Facets understood by the facet validators
FACET_NAMES = (
    "minInclusive",
    "maxInclusive",
    "minLength",
    "maxLength",
    "pattern",
    "totalDigits",
    "fractionDigits",
)
INTEGER_FACETS = ("minLength", "maxLength", "totalDigits", "fractionDigits")

# Walked through without being recorded
CONTAINER_NODES = {
    "schema",
    "sequence",
    "complexContent",
    "simpleContent",
    "extension",
    "restriction",
}
SKIPPED_NODES = {"annotation", "documentation", "appinfo"}

# Attributes declared directly under xs:schema
GLOBAL_SCOPE = "#global"


class SimpleType:
    """A simple type: base type plus a sparse set of facets."""

    __slots__ = ("name", "base_type", "restrictions")

    def __init__(self, name: str, base_type: str, restrictions: Optional[Dict] = None):
        self.name = name
        self.base_type = base_type
        self.restrictions = MappingProxyType(dict(restrictions or {}))

    def __repr__(self):
        return f"SimpleType({self.name!r}, base={self.base_type!r}, restrictions={dict(self.restrictions)})"


class AttributeDecl:
    __slots__ = ("name", "type", "default_value", "use")

    def __init__(self, name, type=None, default_value=None, use=None):
        self.name = name
        self.type = type
        self.default_value = default_value
        self.use = use or "optional"

    @property
    def required(self) -> bool:
        return self.use == "required"

    def to_dict(self):
        return {
            "type": self.type,
            "defaultValue": self.default_value,
            "use": self.use,
        }


class SchemaModel:
    """Read-only view of one schema document."""

    def __init__(
        self,
        complex_type_order: Dict[str, Tuple[str, ...]],
        simple_types: Dict[str, SimpleType],
        attributes: Dict[str, Dict[str, AttributeDecl]],
        element_types: Dict[str, str],
        unknown_elements: List[Dict],
    ):
        self.complex_type_order: Mapping[str, Tuple[str, ...]] = MappingProxyType(
            dict(complex_type_order)
        )
        self.simple_types: Mapping[str, SimpleType] = MappingProxyType(dict(simple_types))
        self.attributes: Mapping[str, Mapping[str, AttributeDecl]] = MappingProxyType(
            {owner: MappingProxyType(dict(decls)) for owner, decls in attributes.items()}
        )
        self.element_types: Mapping[str, str] = MappingProxyType(dict(element_types))
        self.unknown_elements: Tuple[Dict, ...] = tuple(unknown_elements)

    def order_for(self, element_name: str) -> Optional[Tuple[str, ...]]:
        """Expected child order for an element, by its own name or its declared type."""
        order = self.complex_type_order.get(element_name)
        if order is not None:
            return order
        type_name = self.element_types.get(element_name)
        if type_name is not None:
            return self.complex_type_order.get(type_name)
        return None

    def type_of(self, element_name: str) -> Optional[str]:
        return self.element_types.get(element_name)

    def simple_type_for(self, element_name: str) -> Optional[SimpleType]:
        """Simple type governing an element's text, if the schema declares one."""
        type_name = self.element_types.get(element_name)
        if type_name is not None and type_name in self.simple_types:
            return self.simple_types[type_name]
        return self.simple_types.get(element_name)


# ==============================================================================
# MODEL BUILDER
# ==============================================================================


def _unknown(node) -> Tuple[str, Dict]:
    return (
        "unknown",
        {
            "name": local_name(node),
            "attributes": dict(node.attrib),
            "line": node.sourceline,
        },
    )


def _sequence_order(complex_type) -> Optional[Tuple[str, ...]]:
    for child in iter_children(complex_type):
        if local_name(child) != "sequence":
            continue
        names = []
        for item in iter_children(child):
            if local_name(item) != "element":
                continue
            name = item.get("name") or strip_prefix(item.get("ref"))
            if name:
                names.append(name)
        return tuple(names)
    return None


def _facet_value(facet: str, raw: Optional[str], type_name: str):
    if raw is None:
        raise SchemaMalformedError(f"Facet {facet} of simple type {type_name!r} has no value")
    if facet not in INTEGER_FACETS:
        return raw
    try:
        return int(raw.strip())
    except ValueError:
        raise SchemaMalformedError(
            f"Facet {facet} of simple type {type_name!r} must be an integer, got {raw!r}"
        )


def _simple_type_facts(node, type_name: str) -> List[Tuple[str, object]]:
    restriction = None
    for child in iter_children(node):
        if local_name(child) == "restriction":
            restriction = child
            break
    if restriction is None:
        # xs:list / xs:union are outside the supported subset
        return [_unknown(node)]

    facts = []
    restrictions: Dict[str, object] = {}
    patterns: List[str] = []
    for facet_node in iter_children(restriction):
        facet = local_name(facet_node)
        if facet in SKIPPED_NODES:
            continue
        if facet == "pattern":
            patterns.append(_facet_value(facet, facet_node.get("value"), type_name))
        elif facet in FACET_NAMES:
            restrictions[facet] = _facet_value(facet, facet_node.get("value"), type_name)
        else:
            facts.append(_unknown(facet_node))
    if len(patterns) == 1:
        restrictions["pattern"] = patterns[0]
    elif patterns:
        # Patterns of one restriction step are alternatives
        restrictions["pattern"] = "|".join(f"(?:{p})" for p in patterns)

    base = strip_prefix(restriction.get("base")) or "string"
    facts.append(("simple_type", SimpleType(type_name, base, restrictions)))
    return facts


def _walk(node, context: Optional[str]) -> List[Tuple[str, object]]:
    """Depth-first walk returning the facts found below ``node``."""
    name = local_name(node)

    if name in SKIPPED_NODES:
        return []

    if name == "simpleType":
        type_name = node.get("name") or context
        if not type_name:
            return [_unknown(node)]
        return _simple_type_facts(node, type_name)

    if name == "attribute":
        attr_name = node.get("name") or strip_prefix(node.get("ref"))
        if not attr_name:
            return [_unknown(node)]
        decl = AttributeDecl(
            attr_name,
            type=strip_prefix(node.get("type")),
            default_value=node.get("default"),
            use=node.get("use"),
        )
        return [("attribute", (context or GLOBAL_SCOPE, decl))]

    facts: List[Tuple[str, object]] = []
    child_context = context

    if name == "element":
        element_name = node.get("name") or strip_prefix(node.get("ref"))
        type_name = strip_prefix(node.get("type"))
        if element_name and type_name:
            facts.append(("element_type", (element_name, type_name)))
        child_context = element_name or context
    elif name == "complexType":
        type_name = node.get("name") or context
        if type_name:
            order = _sequence_order(node)
            if order is not None:
                facts.append(("order", (type_name, order)))
        child_context = type_name
    elif name not in CONTAINER_NODES:
        logger.debug("Unhandled schema construct <%s> at line %s", name, node.sourceline)
        facts.append(_unknown(node))

    for child in iter_children(node):
        facts.extend(_walk(child, child_context))
    return facts


def build_schema_model(schema_root) -> SchemaModel:
    """
    Walk a parsed XSD tree once and build its Schema Model.

    Args:
        schema_root: Root element of the parsed schema

    Returns:
        SchemaModel

    Raises:
        SchemaMalformedError: If the input is not an xs:schema element
    """
    if not is_element(schema_root):
        raise SchemaMalformedError(
            f"Invalid schema tree: expected an element, got {type(schema_root).__name__}"
        )
    if local_name(schema_root) != "schema":
        raise SchemaMalformedError(
            f"Invalid schema tree: root element is <{local_name(schema_root)}>, expected <schema>"
        )

    complex_type_order: Dict[str, Tuple[str, ...]] = {}
    simple_types: Dict[str, SimpleType] = {}
    attributes: Dict[str, Dict[str, AttributeDecl]] = {}
    element_types: Dict[str, str] = {}
    unknown_elements: List[Dict] = []

    for kind, value in _walk(schema_root, None):
        if kind == "order":
            type_name, order = value
            if type_name in complex_type_order:
                logger.debug("Duplicate complex type %s ignored", type_name)
                continue
            complex_type_order[type_name] = order
        elif kind == "simple_type":
            simple_types.setdefault(value.name, value)
        elif kind == "attribute":
            owner, decl = value
            attributes.setdefault(owner, {})[decl.name] = decl
        elif kind == "element_type":
            element_name, type_name = value
            element_types.setdefault(element_name, type_name)
        else:
            unknown_elements.append(value)

    return SchemaModel(
        complex_type_order, simple_types, attributes, element_types, unknown_elements
    )
