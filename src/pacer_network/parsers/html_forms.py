"""
HTML form helpers for replaying portal forms.

The portal expects each request to echo back hidden fields (CSRF tokens,
case ids, servlet names) scraped from the previous page. These helpers
collect such fields generically so the retrieval steps only name the one or
two fields they override.
"""

import re
from typing import Callable, Dict, Optional

import lxml.html
from lxml.html import HtmlElement

from pacer_network.exceptions import RetrievalError

FieldFilter = Callable[[str, str], bool]


def parse_page(text: str, page: str = "page") -> HtmlElement:
    """
    Parse an HTML page.

    Args:
        text: Response body
        page: Page name used in error messages

    Raises:
        RetrievalError: If the body is empty
    """
    if text is None or not text.strip():
        raise RetrievalError(f"Empty response body for {page}")
    return lxml.html.document_fromstring(text)


def first_form(doc: HtmlElement, page: str = "page") -> HtmlElement:
    """
    First <form> of a page.

    Raises:
        RetrievalError: If the page has no form
    """
    forms = doc.xpath('//form')
    if not forms:
        raise RetrievalError(f"No form found on {page}")
    return forms[0]


def find_form_with_input(doc: HtmlElement, input_name: str) -> Optional[HtmlElement]:
    """First form containing an <input> with the given name, or None."""
    for form in doc.xpath('//form'):
        if form.xpath('.//input[@name=$name]', name=input_name):
            return form
    return None


def find_link(doc: HtmlElement, pattern: str) -> Optional[str]:
    """href of the first <a> whose target matches pattern, or None."""
    regex = re.compile(pattern)
    for href in doc.xpath('//a/@href'):
        if regex.search(href):
            return href
    return None


def collect_form_fields(form: HtmlElement, include: FieldFilter) -> Dict[str, str]:
    """
    Collect named <input> values from a form.

    Args:
        form: Form element
        include: Predicate (input_type, name) -> bool; input_type is
            lowercased and defaults to 'text' as in browsers

    Returns:
        Field name -> value mapping (missing values become '')
    """
    fields = {}
    for element in form.xpath('.//input'):
        name = element.get('name')
        if not name:
            continue
        input_type = (element.get('type') or 'text').lower()
        if include(input_type, name):
            fields[name] = element.get('value') or ''
    return fields


def hidden_fields(form: HtmlElement, submit_name: Optional[str] = None) -> Dict[str, str]:
    """Hidden inputs, plus the submit button named submit_name if given."""
    return collect_form_fields(
        form,
        lambda input_type, name: (
            input_type == 'hidden'
            or (input_type == 'submit' and name == submit_name)
        )
    )


def non_submit_fields(form: HtmlElement) -> Dict[str, str]:
    """Every named input except submit buttons."""
    return collect_form_fields(form, lambda input_type, name: input_type != 'submit')


def input_value(form: HtmlElement, name: str) -> Optional[str]:
    """Value of the named input, or None if absent."""
    values = form.xpath('.//input[@name=$name]/@value', name=name)
    return values[0] if values else None
