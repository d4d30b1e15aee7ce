"""
Utils package - helpers dùng chung cho scraper, store và HTTP layer
"""

import sys


def safe_print(*args, **kwargs):
    """Print function an toàn với encoding UTF-8 trên Windows"""
    try:
        print(*args, **kwargs)
    except UnicodeEncodeError:
        message = ' '.join(str(arg) for arg in args)
        message = message.encode('ascii', 'replace').decode('ascii')
        print(message, **kwargs)
    sys.stdout.flush()


def job_tag(job_id):
    """Prefix cho log của một job: [storyId]"""
    return f"[{job_id}]"
