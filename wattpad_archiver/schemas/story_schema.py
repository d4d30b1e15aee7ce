"""
Story document schema - collection story/{storyId}
Written once, only when every chapter was scraped
"""

STORY_SCHEMA = {
    "title": "span.title.h5",            # Story title
    "author": "span.author.h6",          # Author name
    "pages": [],                         # One list of HTML fragments per chapter, reading order
    "summary": "h2.description > pre",   # Summary text (ASCII only)
    "url": None,                         # Summary page URL
    "timestamp": None,                   # Epoch milliseconds at commit
}
