"""
Base helpers for extractor modules.
Extractors are pure: they read a parsed document and return one value.
"""

from bs4 import BeautifulSoup
from bs4.dammit import EntitySubstitution
from bs4.formatter import HTMLFormatter

from wattpad_archiver.exceptions import ExtractionError


def _substitute_like_browser(value):
    # innerHTML escapes only &, <, > and writes U+00A0 back as &nbsp;
    return EntitySubstitution.substitute_xml(value).replace("\xa0", "&nbsp;")


# Serializer matching the browser's innerHTML, so later ASCII stripping
# never eats the space of an &nbsp;
INNER_HTML_FORMATTER = HTMLFormatter(
    entity_substitution=_substitute_like_browser,
    void_element_close_prefix=None,
)


def parse_document(page_html):
    """Parse the HTML of the currently loaded page"""
    return BeautifulSoup(page_html or "", "html.parser")


class BaseScraper:
    """Base class cho tất cả extractors - chỉ chứa helpers đọc DOM"""

    @staticmethod
    def select_required(root, selector, what):
        """
        First element matching selector, or ExtractionError

        Args:
            root: BeautifulSoup document hoặc Tag
            selector: CSS selector
            what: tên field (dùng trong message lỗi)
        """
        element = root.select_one(selector)
        if element is None:
            raise ExtractionError(f"{what}: no element matches '{selector}'")
        return element

    @staticmethod
    def required_href(element, what):
        href = element.get("href")
        if not href:
            raise ExtractionError(f"{what}: link has no href")
        return str(href)

    @staticmethod
    def inner_text(element):
        return element.get_text().strip()

    @staticmethod
    def inner_html(element):
        return element.decode_contents(formatter=INNER_HTML_FORMATTER)
