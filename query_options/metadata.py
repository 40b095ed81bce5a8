"""Build the OData service document and CSDL ($metadata) document."""
import xml.etree.ElementTree as ET
from typing import Dict, List, Sequence, Tuple

from query_options.capabilities import QueryCapabilities
from query_options.schema import EntitySchema

EDMX_NS = "http://docs.oasis-open.org/odata/ns/edmx"
EDM_NS = "http://docs.oasis-open.org/odata/ns/edm"
CAPABILITIES_VOCABULARY = "Org.OData.Capabilities.V1"
CAPABILITIES_URI = "https://oasis-tcs.github.io/odata-vocabularies/vocabularies/Org.OData.Capabilities.V1.xml"
CONTAINER_NAMESPACE = "Default"
CONTAINER_NAME = "Container"

EntitySetEntry = Tuple[EntitySchema, QueryCapabilities]


def _bool(value: bool) -> str:
    return "true" if value else "false"


def _record_annotation(parent: ET.Element, term: str, prop: str, value: bool) -> None:
    annotation = ET.SubElement(parent, "Annotation", Term=f"{CAPABILITIES_VOCABULARY}.{term}")
    record = ET.SubElement(annotation, "Record")
    ET.SubElement(record, "PropertyValue", Property=prop, Bool=_bool(value))


def _capability_annotations(parent: ET.Element, schema: EntitySchema, capabilities: QueryCapabilities) -> None:
    annotations = ET.SubElement(
        parent, "Annotations", Target=f"{CONTAINER_NAMESPACE}.{CONTAINER_NAME}/{schema.entity_set}"
    )
    _record_annotation(annotations, "FilterRestrictions", "Filterable", capabilities.filter)
    _record_annotation(annotations, "SortRestrictions", "Sortable", capabilities.orderby)
    _record_annotation(annotations, "CountRestrictions", "Countable", capabilities.count)
    _record_annotation(annotations, "ExpandRestrictions", "Expandable", capabilities.expand)
    _record_annotation(annotations, "SelectSupport", "Supported", capabilities.select)
    ET.SubElement(annotations, "Annotation", Term=f"{CAPABILITIES_VOCABULARY}.TopSupported",
                  Bool=_bool(capabilities.top))
    ET.SubElement(annotations, "Annotation", Term=f"{CAPABILITIES_VOCABULARY}.SkipSupported",
                  Bool=_bool(capabilities.skip))


def _entity_type(parent: ET.Element, schema: EntitySchema) -> None:
    entity_type = ET.SubElement(parent, "EntityType", Name=schema.entity_type)
    key = ET.SubElement(entity_type, "Key")
    for name in schema.key:
        ET.SubElement(key, "PropertyRef", Name=name)
    for prop in schema.properties:
        attributes = {"Name": prop.name, "Type": prop.edm_type}
        if not prop.nullable:
            attributes["Nullable"] = "false"
        ET.SubElement(entity_type, "Property", attributes)


def build_metadata_document(entity_sets: Sequence[EntitySetEntry]) -> str:
    """
    Render an EDMX 4.0 document for the given entity sets.

    Namespace declarations are written as plain attributes so the EDM schema
    elements stay unprefixed, as OData clients expect.
    """
    root = ET.Element("edmx:Edmx", {"Version": "4.0", "xmlns:edmx": EDMX_NS})
    reference = ET.SubElement(root, "edmx:Reference", Uri=CAPABILITIES_URI)
    ET.SubElement(reference, "edmx:Include", Namespace=CAPABILITIES_VOCABULARY, Alias="Capabilities")
    data_services = ET.SubElement(root, "edmx:DataServices")

    by_namespace: Dict[str, List[EntitySchema]] = {}
    for schema, _ in entity_sets:
        by_namespace.setdefault(schema.namespace, []).append(schema)
    for namespace, schemas in by_namespace.items():
        schema_element = ET.SubElement(data_services, "Schema", {"Namespace": namespace, "xmlns": EDM_NS})
        for schema in schemas:
            _entity_type(schema_element, schema)

    container_schema = ET.SubElement(data_services, "Schema", {"Namespace": CONTAINER_NAMESPACE, "xmlns": EDM_NS})
    container = ET.SubElement(container_schema, "EntityContainer", Name=CONTAINER_NAME)
    for schema, _ in entity_sets:
        ET.SubElement(container, "EntitySet", Name=schema.entity_set, EntityType=schema.qualified_type)
    for schema, capabilities in entity_sets:
        _capability_annotations(container_schema, schema, capabilities)

    return '<?xml version="1.0" encoding="utf-8"?>' + ET.tostring(root, encoding="unicode")


def build_service_document(context_url: str, entity_sets: Sequence[EntitySetEntry]) -> dict:
    """Service document listing every entity set."""
    return {
        "@odata.context": context_url,
        "value": [
            {"name": schema.entity_set, "kind": "EntitySet", "url": schema.entity_set}
            for schema, _ in entity_sets
        ],
    }
