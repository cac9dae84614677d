"""
Association extraction from PACER appellate docket XML.

Docket structure (fields used):
    <stub caseNumber="20-1234" .../>
    <associatedCase memberCaseNumber="20-5678" associatedType="related"
                    dateStart="2020-01-01"/>

Unexpected shapes are common in production dockets, so every failure mode
degrades to a ParseWarning and an empty result instead of raising.
"""

import logging
import warnings
from pathlib import Path
from typing import Iterable, List, Optional, Union

import pandas as pd
from lxml import etree

from pacer_network.exceptions import ParseWarning
from pacer_network.models.association import Association, ASSOCIATION_COLUMNS

logger = logging.getLogger(__name__)

XmlInput = Union[str, bytes, Path, List[str], None]


def _warn(message: str) -> None:
    logger.warning(message)
    warnings.warn(message, ParseWarning, stacklevel=3)


def _attr(element, name: str) -> Optional[str]:
    value = element.get(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def load_docket_xml(xml_content: XmlInput) -> Optional[bytes]:
    """
    Resolve XML input to bytes.

    Accepts raw XML (str/bytes), a list of lines, or a path to an XML file.
    A string that does not start with '<' is treated as a file path.

    Returns:
        XML bytes, or None (with a ParseWarning) for empty or missing input
    """
    if xml_content is None:
        _warn("Empty XML input")
        return None

    if isinstance(xml_content, (list, tuple)):
        xml_content = "\n".join(str(line) for line in xml_content)

    if isinstance(xml_content, str) and not xml_content.lstrip('\ufeff \t\r\n').startswith('<'):
        if not xml_content.strip():
            _warn("Empty XML input")
            return None
        xml_content = Path(xml_content)

    if isinstance(xml_content, Path):
        # Over-long or NUL-containing strings are not paths at all.
        try:
            if not xml_content.is_file():
                _warn(f"XML file not found: {xml_content}")
                return None
            data = xml_content.read_bytes()
        except (OSError, ValueError) as e:
            _warn(f"Could not read XML input as a file: {e}")
            return None
    elif isinstance(xml_content, str):
        data = xml_content.encode('utf-8')
    else:
        data = xml_content

    if not data.strip():
        _warn("Empty XML input")
        return None
    return data


def extract_associations(xml_content: XmlInput) -> List[Association]:
    """
    Extract case associations from one docket.

    Args:
        xml_content: Raw XML text/bytes, list of lines, or path to an XML file

    Returns:
        - [] with a ParseWarning if input is empty/missing, malformed, or has
          no stub caseNumber
        - [Association(main_case=root)] if the docket lists no associated cases
        - one Association per <associatedCase> element otherwise

    Example:
        >>> xml = ('<docket><stub caseNumber="20-1234"/>'
        ...        '<associatedCase memberCaseNumber="20-5678" associatedType="related"/>'
        ...        '</docket>')
        >>> [a.associated_case for a in extract_associations(xml)]
        ['20-5678']
    """
    data = load_docket_xml(xml_content)
    if data is None:
        return []

    parser = etree.XMLParser(resolve_entities=False, no_network=True, huge_tree=True)
    try:
        root = etree.fromstring(data, parser)
    except etree.XMLSyntaxError as e:
        _warn(f"Error parsing XML: {e}")
        return []

    stub = next(root.iter('{*}stub'), None)
    main_case = _attr(stub, 'caseNumber') if stub is not None else None
    if main_case is None:
        _warn("Could not find main case number in XML")
        return []

    elements = list(root.iter('{*}associatedCase'))
    if not elements:
        return [Association(main_case=main_case)]

    associations = [
        Association(
            main_case=main_case,
            associated_case=_attr(element, 'memberCaseNumber'),
            association_type=_attr(element, 'associatedType'),
            date_start=_attr(element, 'dateStart'),
        )
        for element in elements
    ]
    logger.debug(f"Extracted {len(associations)} association(s) for {main_case}")
    return associations


def extract_edges(xml_content: XmlInput) -> List[Association]:
    """Associations that are graph edges (associated_case present)."""
    return [a for a in extract_associations(xml_content) if a.is_edge]


def associations_to_frame(associations: Iterable[Association]) -> pd.DataFrame:
    """DataFrame with columns main_case, associated_case, association_type, date_start."""
    rows = [a.to_row() for a in associations]
    return pd.DataFrame(rows, columns=ASSOCIATION_COLUMNS)
