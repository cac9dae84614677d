"""
Parsing modules for PACER portal pages and docket XML.

- html_forms: generic hidden-field collection for replaying portal forms
- association_parser: associated-case edges from appellate docket XML
"""

from .association_parser import (
    extract_associations,
    extract_edges,
    associations_to_frame,
    load_docket_xml,
)
from .html_forms import (
    parse_page,
    first_form,
    find_form_with_input,
    find_link,
    collect_form_fields,
    hidden_fields,
    non_submit_fields,
    input_value,
)

__all__ = [
    # Docket XML
    'extract_associations',
    'extract_edges',
    'associations_to_frame',
    'load_docket_xml',
    # Portal HTML
    'parse_page',
    'first_form',
    'find_form_with_input',
    'find_link',
    'collect_form_fields',
    'hidden_fields',
    'non_submit_fields',
    'input_value',
]
