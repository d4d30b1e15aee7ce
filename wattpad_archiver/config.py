import os

# --- CẤU HÌNH HỆ THỐNG ---
BASE_URL = "https://www.wattpad.com"
REFERER = BASE_URL  # Referer cố định cho mọi lần navigate

PORT = int(os.getenv("PORT", "5000"))

# Thư mục tạm cho file EPUB (xóa sau khi download xong)
ARCHIVE_DIR = os.getenv("ARCHIVE_DIR", "archive")
EPUB_CLEANUP_DELAY = 3  # giây

# --- CẤU HÌNH BROWSER ---
HEADLESS = True
BROWSER_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
]

NAVIGATION_TIMEOUT_MS = 60000   # domcontentloaded, không đợi full load
SCROLL_DISTANCE = 100           # px mỗi bước
SCROLL_INTERVAL_MS = 50
SCROLL_TIMEOUT = 120            # giây, cho toàn bộ auto scroll

# Số job scrape chạy đồng thời (mỗi job giữ 1 tab)
MAX_CONCURRENT_JOBS = 3

# Pool user agent, chọn ngẫu nhiên mỗi lần navigate
USER_AGENTS = [
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/60.0.3112.113 Safari/537.36",
    "Mozilla/5.0 (Windows NT 6.1; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/60.0.3112.90 Safari/537.36",
    "Mozilla/5.0 (Windows NT 5.1; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/60.0.3112.90 Safari/537.36",
    "Mozilla/5.0 (Windows NT 6.2; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/60.0.3112.90 Safari/537.36",
    "Mozilla/5.0 (Windows NT 6.3; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/60.0.3112.113 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/57.0.2987.133 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/60.0.3112.90 Safari/537.36",
    "Mozilla/5.0 (Windows NT 6.1; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/57.0.2987.133 Safari/537.36",
    "Mozilla/5.0 (Windows NT 6.1; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/62.0.3202.89 Safari/537.36",
]

# --- CẤU HÌNH PDF ---
PDF_FORMAT = "A4"
PDF_MARGIN = {"left": "2cm", "top": "2.5cm", "right": "2cm", "bottom": "2.5cm"}
PDF_READY_SELECTOR = ".page"  # đợi frontend render xong nội dung

# --- CẤU HÌNH MONGODB ---
MONGODB_URI = "mongodb://localhost:27017/wattpad_archiver"
DB_NAME = "wattpad_archiver"

COL_STORY = "story"
COL_PROGRESS = "progress"
COL_ERROR = "error"
COL_QUEUE = "queue"

# Khi nhận SIGTERM: True = đánh dấu lỗi tất cả job đang chạy,
# False = chỉ job cập nhật progress gần nhất
SHUTDOWN_SWEEP_ALL = True

# Allow environment variable override
if os.getenv("MONGODB_URI"):
    MONGODB_URI = os.getenv("MONGODB_URI")
if os.getenv("DB_NAME"):
    DB_NAME = os.getenv("DB_NAME")
if os.getenv("HEADLESS"):
    HEADLESS = os.getenv("HEADLESS").lower() not in ("0", "false", "no")
if os.getenv("MAX_CONCURRENT_JOBS"):
    MAX_CONCURRENT_JOBS = int(os.getenv("MAX_CONCURRENT_JOBS"))
if os.getenv("SHUTDOWN_SWEEP_ALL"):
    SHUTDOWN_SWEEP_ALL = os.getenv("SHUTDOWN_SWEEP_ALL").lower() not in ("0", "false", "no")
