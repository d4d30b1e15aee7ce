"""
EPUB Builder Module

Builds an EPUB from the content array the frontend sends with POST /epub:
[{"title": "...", "data": "<h5>..</h5><p>..</p>"}, ...]
"""

import uuid

from ebooklib import epub

from wattpad_archiver import config
from wattpad_archiver.exceptions import EpubGenerationError
from wattpad_archiver.utils import safe_print
from wattpad_archiver.utils.file_utils import build_output_path


def _chapter_items(content):
    if not isinstance(content, list) or not content:
        raise EpubGenerationError("content must be a non-empty list")

    chapters = []
    for index, item in enumerate(content, 1):
        if isinstance(item, str):
            item = {"data": item}
        if not isinstance(item, dict) or not isinstance(item.get("data"), str) or not item["data"].strip():
            raise EpubGenerationError(f"content[{index - 1}] has no data")

        chapter_title = item.get("title") or f"Chapter {index}"
        chapter = epub.EpubHtml(
            title=chapter_title,
            file_name=f"chapter_{index:04d}.xhtml",
            lang="en",
        )
        chapter.content = item["data"]
        chapters.append(chapter)
    return chapters


def build_epub(title, author, content, output_dir=None, identifier=None):
    """
    Write <output_dir>/<sanitized title>.epub

    Args:
        title: tên truyện (ký tự '/' và '\\' bị bỏ khỏi tên file)
        author: tác giả
        content: list of {title?, data} (hoặc string HTML)
        output_dir: default config.ARCHIVE_DIR, tạo nếu chưa có
        identifier: EPUB identifier, random UUID nếu None

    Returns:
        Path of the written file
    """
    chapters = _chapter_items(content)

    book = epub.EpubBook()
    book.set_identifier(identifier or str(uuid.uuid4()))
    book.set_title(title)
    book.set_language("en")
    book.add_author(author)

    for chapter in chapters:
        book.add_item(chapter)
    book.toc = chapters
    book.add_item(epub.EpubNcx())
    book.add_item(epub.EpubNav())
    book.spine = ["nav"] + chapters

    file_path = build_output_path(title, output_dir or config.ARCHIVE_DIR)
    try:
        epub.write_epub(file_path, book)
    except Exception as e:
        raise EpubGenerationError(f"Không thể ghi EPUB {file_path}: {e}") from e

    safe_print(f"✅ [EPUB] Written: {file_path} ({len(chapters)} chapters)")
    return file_path
