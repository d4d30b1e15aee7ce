"""
Story scraper module - table of contents and landing page of a Wattpad story.
Responsible for: title, author, chapter links, summary link, summary text.
"""

from wattpad_archiver.scrapers.base import BaseScraper
from wattpad_archiver.utils.text_utils import clean_summary


class StoryScraper(BaseScraper):
    """Extractors for story metadata (Wattpad table of contents page)"""

    TITLE_SELECTOR = ".title.h5"
    AUTHOR_SELECTOR = ".author.h6"
    TOC_SELECTOR = "ul.table-of-contents"
    TOC_LINK_SELECTOR = "a.on-navigate"
    TOC_HEADER_SELECTOR = "div.toc-header.text-center"
    SUMMARY_SELECTOR = "h2.description > pre"

    @staticmethod
    def extract_title(soup):
        element = StoryScraper.select_required(soup, StoryScraper.TITLE_SELECTOR, "title")
        return StoryScraper.inner_text(element)

    @staticmethod
    def extract_author(soup):
        element = StoryScraper.select_required(soup, StoryScraper.AUTHOR_SELECTOR, "author")
        return StoryScraper.inner_text(element)

    @staticmethod
    def extract_chapters(soup):
        """
        Chapter hrefs from the table of contents, in document (reading) order

        Returns:
            List of partial URLs like "/123456-chapter-one"
        """
        toc = StoryScraper.select_required(soup, StoryScraper.TOC_SELECTOR, "chapters")

        chapters = []
        for index, item in enumerate(toc.find_all("li"), 1):
            link = StoryScraper.select_required(item, StoryScraper.TOC_LINK_SELECTOR, f"chapter {index}")
            chapters.append(StoryScraper.required_href(link, f"chapter {index}"))
        return chapters

    @staticmethod
    def extract_link(soup):
        """Href of the story's summary/landing page"""
        header = StoryScraper.select_required(soup, StoryScraper.TOC_HEADER_SELECTOR, "summary link")
        link = StoryScraper.select_required(header, StoryScraper.TOC_LINK_SELECTOR, "summary link")
        return StoryScraper.required_href(link, "summary link")

    @staticmethod
    def extract_summary(soup):
        """Summary text, typography normalized and non-ASCII removed"""
        element = StoryScraper.select_required(soup, StoryScraper.SUMMARY_SELECTOR, "summary")
        return clean_summary(StoryScraper.inner_html(element))
