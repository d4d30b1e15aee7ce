"""
Chapter Content scraper module - handles chapter body for Wattpad.
Responsible for: chapter heading + paragraph HTML fragments.
"""

from wattpad_archiver.scrapers.base import BaseScraper
from wattpad_archiver.utils.text_utils import normalize_typography

# Đánh dấu bắt đầu chapter mới cho EPUB/PDF
PAGE_BREAK = "<!--ADD_PAGE-->"


class ChapterContentScraper(BaseScraper):
    """Extractor for chapter content (Wattpad reading page)"""

    HEADER_SELECTOR = "header > h2"
    PARAGRAPH_SELECTOR = "p[data-p-id]"
    COMMENT_MARKER_SELECTOR = ".comment-marker"

    @staticmethod
    def extract_content(soup):
        """
        Trích xuất nội dung chapter từ document đã scroll hết

        Inline comment markers are removed before reading paragraphs. The page
        is modified in place, which is fine because every call parses a fresh
        snapshot of the tab.

        Returns:
            [PAGE_BREAK, "<h5>title</h5>", "<p>...</p>", ...]
        """
        for marker in soup.select(ChapterContentScraper.COMMENT_MARKER_SELECTOR):
            marker.decompose()

        header = ChapterContentScraper.select_required(
            soup, ChapterContentScraper.HEADER_SELECTOR, "chapter title"
        )
        title = normalize_typography(ChapterContentScraper.inner_html(header))

        items = [PAGE_BREAK, f"<h5>{title}</h5>"]
        for paragraph in soup.select(ChapterContentScraper.PARAGRAPH_SELECTOR):
            text = normalize_typography(ChapterContentScraper.inner_html(paragraph))
            items.append(f"<p>{text}</p>")
        return items
