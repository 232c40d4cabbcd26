from datetime import date
from decimal import Decimal
from typing import NamedTuple, Tuple

from lxml import etree

from .config import (
    DEFAULT_COUNTRY_CODE, DEFAULT_TOTAL_PACKAGES, DEFAULT_UNIT_OF_MEASUREMENT,
    REQUEST_ACTION, XPCI_VERSION,
)

XML_LANG = "{http://www.w3.org/XML/1998/namespace}lang"
LANGUAGE = "en-US"
XML_DECLARATION = b"<?xml"


class Node(NamedTuple):
    """One element of a request document: a leaf value or a tuple of child nodes."""
    name: str
    value: object = None
    children: Tuple["Node", ...] = ()


def format_value(value) -> str:
    """Text written for a leaf value."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return format(Decimal(repr(value)), "f")
    if isinstance(value, Decimal):
        return format(value, "f")
    if isinstance(value, date):
        return value.strftime("%Y%m%d")
    raise TypeError(f"Cannot write {type(value).__name__} value {value!r} to a request document")


def address_node(name, address) -> Node:
    return Node(name, children=(
        Node("AddressArtifactFormat", children=(
            Node("PoliticalDivision2", address.city),
            Node("PoliticalDivision1", address.state),
            Node("CountryCode", address.country_code or DEFAULT_COUNTRY_CODE),
            Node("PostcodePrimaryLow", address.zip),
        )),
    ))


def build_access_request(config) -> Node:
    return Node("AccessRequest", children=(
        Node("AccessLicenseNumber", config.access_license_number),
        Node("UserId", config.user_id),
        Node("Password", config.password),
    ))


def build_transit_request(config, shipment, pickup_date) -> Node:
    total_packages = shipment.total_packages
    if total_packages is None:
        total_packages = DEFAULT_TOTAL_PACKAGES

    return Node("TimeInTransitRequest", children=(
        Node("Request", children=(
            Node("RequestAction", REQUEST_ACTION),
            Node("TransactionReference", children=(
                Node("XpciVersion", XPCI_VERSION),
            )),
        )),
        Node("TotalPackagesInShipment", total_packages),
        Node("ShipmentWeight", children=(
            Node("UnitOfMeasurement", children=(
                Node("Code", shipment.unit_of_measurement or DEFAULT_UNIT_OF_MEASUREMENT),
            )),
            Node("Weight", shipment.weight),
        )),
        Node("PickupDate", pickup_date),
        address_node("TransitFrom", config.sender),
        address_node("TransitTo", shipment.destination),
    ))


def _emit(node, parent=None):
    element = etree.Element(node.name) if parent is None else etree.SubElement(parent, node.name)
    if node.children:
        for child in node.children:
            _emit(child, element)
    else:
        element.text = format_value(node.value)
    return element


def generate_xml(node) -> bytes:
    """Serializes a node tree as a standalone UTF-8 document tagged xml:lang="en-US"."""
    root = _emit(node)
    root.set(XML_LANG, LANGUAGE)
    return etree.tostring(root, xml_declaration=True, encoding="UTF-8")


def build_request(config, shipment, pickup_date, access_xml=None) -> bytes:
    """
    Builds the full request body: the access document followed by the time in
    transit document. UPS expects the two documents back to back in one body,
    so they are concatenated rather than wrapped in a common root.
    """
    if access_xml is None:
        access_xml = generate_xml(build_access_request(config))
    return access_xml + generate_xml(build_transit_request(config, shipment, pickup_date))


def parse_request(payload: bytes):
    """Splits a request body back into its (access, transit) root elements."""
    documents = [XML_DECLARATION + part for part in payload.split(XML_DECLARATION) if part.strip()]
    if len(documents) != 2:
        raise ValueError(f"Expected 2 documents in request body, found {len(documents)}")
    access, transit = (etree.fromstring(document) for document in documents)
    return access, transit
