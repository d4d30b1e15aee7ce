"""
Progress record schema - collection progress/{storyId}
All fields null when no job is in flight for the story
"""

PROGRESS_SCHEMA = {
    "current": None,                      # Chapters finished so far (1..total)
    "total": None,                        # Chapters in the table of contents
    "timestamp": None,                    # Epoch milliseconds of last update
}
