"""
Scrapers package - DOM extractors for Wattpad pages.

Each extractor is a static method taking a parsed document and returning one value:
- story: title, author, chapter links, summary link, summary text
- chapter_content: chapter heading + paragraphs
"""

from wattpad_archiver.scrapers.base import BaseScraper, parse_document
from wattpad_archiver.scrapers.story import StoryScraper
from wattpad_archiver.scrapers.chapter_content import ChapterContentScraper, PAGE_BREAK

__all__ = [
    'BaseScraper',
    'StoryScraper',
    'ChapterContentScraper',
    'PAGE_BREAK',
    'parse_document'
]
