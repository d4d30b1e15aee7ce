# -*- coding: utf-8 -*-
"""
File utilities - EPUB output paths and delayed cleanup of local files
"""

import os
import threading

from wattpad_archiver.utils import safe_print

# Ký tự sẽ bị coi là thư mục trong đường dẫn
PATH_SEPARATORS = ['/', '\\']


def sanitize_filename(name: str) -> str:
    """
    Strip path separator characters from a title so it is a single file name

    Examples:
        - "A/B Story" -> "AB Story"
    """
    if not name:
        return "unknown"
    
    safe_name = name
    for char in PATH_SEPARATORS:
        safe_name = safe_name.replace(char, '')
    
    safe_name = safe_name.strip()
    return safe_name or "unknown"


def build_output_path(title: str, output_dir: str, extension: str = "epub") -> str:
    """Create output_dir if needed and return <output_dir>/<sanitized title>.<extension>"""
    os.makedirs(output_dir, exist_ok=True)
    return os.path.join(output_dir, f"{sanitize_filename(title)}.{extension}")


def remove_file(path: str) -> bool:
    """Xóa file local, trả về True nếu đã xóa"""
    try:
        os.remove(path)
        safe_print(f"🗑️ Local file deleted: {path}")
        return True
    except FileNotFoundError:
        return False
    except OSError as e:
        safe_print(f"⚠️ Không thể xóa file {path}: {e}")
        return False


def schedule_file_removal(path: str, delay: float) -> threading.Timer:
    """
    Delete path after delay seconds on a daemon timer thread

    Returns:
        The started Timer (join() it to wait for the deletion)
    """
    timer = threading.Timer(delay, remove_file, args=(path,))
    timer.daemon = True
    timer.start()
    return timer
