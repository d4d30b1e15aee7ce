"""
wattpad_archiver - scrape a Wattpad story chapter by chapter into MongoDB,
with PDF/EPUB export.
"""

__version__ = "1.0.0"
