# File: mods.py

"""
Issue date access through the MODS descriptive metadata document.

Unlike relationships.get_date_issued(), reading returns None when no usable
date is present; nothing is substituted.
"""

import logging
import xml.etree.ElementTree as ET
from datetime import date, datetime
from typing import Any, List, Optional, Union

from .date_utils import parse_datetime, format_issue_date
from .namespaces import MODS_NS

logger = logging.getLogger(__name__)

ET.register_namespace('mods', MODS_NS)

ORIGIN_INFO = 'originInfo'
DATE_ISSUED = 'dateIssued'


def _owner_id(datastream: Any) -> str:
    parent = getattr(datastream, 'parent', None)
    return getattr(parent, 'id', None) or '(unknown object)'


def _parse(datastream: Any) -> Optional[ET.Element]:
    try:
        return ET.fromstring(datastream.content)
    except ET.ParseError as e:
        logger.warning(f"Could not parse MODS of {_owner_id(datastream)}: {e}")
        return None


def _tag(root: ET.Element, name: str) -> str:
    """Qualify a MODS element name with the namespace of the document root."""
    if root.tag.startswith('{'):
        namespace = root.tag[1:].partition('}')[0]
        return f"{{{namespace}}}{name}"
    return name


def _date_issued_elements(root: ET.Element) -> List[ET.Element]:
    """dateIssued elements under originInfo that are not range endpoints."""
    path = f".//{_tag(root, ORIGIN_INFO)}/{_tag(root, DATE_ISSUED)}"
    return [element for element in root.findall(path) if element.get('point') is None]


def read_date(datastream: Any) -> Optional[datetime]:
    """
    Read the issue date from a MODS datastream.

    Args:
        datastream: Handle with a ``content`` attribute holding the MODS XML

    Returns:
        The date from the first dateIssued element without a point
        attribute, or None if the document is not XML, has no such element
        or the element does not hold a date
    """
    root = _parse(datastream)
    if root is None:
        return None

    elements = _date_issued_elements(root)
    if not elements:
        logger.warning(f"No dateIssued in MODS of {_owner_id(datastream)}")
        return None

    issued = parse_datetime(elements[0].text)
    if issued is None:
        logger.warning(f"Unparseable dateIssued '{elements[0].text}' in MODS of {_owner_id(datastream)}",
                       extra={'issue_id': _owner_id(datastream)})
    return issued


def write_date(datastream: Any, issued: Union[date, datetime]) -> bool:
    """
    Set the issue date in a MODS datastream and save it.

    Existing dateIssued elements are removed and one new element with
    encoding="iso8601" is appended to the originInfo container, which is
    created when missing.

    Args:
        datastream: Handle with ``content`` and ``set_content_from_string``
        issued: New issue date

    Returns:
        True if the document was saved, False otherwise
    """
    root = _parse(datastream)
    if root is None:
        return False

    origin_info_tag = _tag(root, ORIGIN_INFO)
    date_issued_tag = _tag(root, DATE_ISSUED)

    for origin_info in list(root.iter(origin_info_tag)):
        for element in origin_info.findall(date_issued_tag):
            if element.get('point') is None:
                origin_info.remove(element)

    origin_info = root.find(origin_info_tag)
    if origin_info is None:
        origin_info = ET.SubElement(root, origin_info_tag)

    date_issued = ET.SubElement(origin_info, date_issued_tag, {'encoding': 'iso8601'})
    date_issued.text = format_issue_date(issued)

    try:
        datastream.set_content_from_string(ET.tostring(root, encoding='unicode'))
    except Exception as e:
        logger.error(f"Failed to save MODS date for {_owner_id(datastream)}: {e}")
        return False

    logger.info(f"Set MODS dateIssued of {_owner_id(datastream)} to {date_issued.text}")
    return True
