"""
Intake payload schema - body of POST /
"""

JOB_SCHEMA = {
    "url": None,                          # Story table-of-contents URL
    "storyId": None,                      # Job id chosen by the client
}
