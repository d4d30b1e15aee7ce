import signal
import sys

from wattpad_archiver import config
from wattpad_archiver.exceptions import PersistenceError
from wattpad_archiver.runtime import ScraperRuntime
from wattpad_archiver.server import create_app
from wattpad_archiver.utils import safe_print


def main():
    # Khởi tạo browser + MongoDB + workers (1 lần cho cả server)
    runtime = ScraperRuntime()
    runtime.start()
    app = create_app(runtime)

    def handle_shutdown(signum, frame):
        safe_print("[ONKILL] Server received kill signal, logging current tickets as failure...")
        try:
            cleaned = runtime.shutdown_sweep()
            safe_print(f"   Đã đánh dấu lỗi {len(cleaned)} job")
        except PersistenceError as e:
            safe_print(f"⚠️ Không thể cleanup jobs: {e}")
        safe_print("Ticket disposed, good bye")
        sys.exit(0)

    signal.signal(signal.SIGTERM, handle_shutdown)
    signal.signal(signal.SIGINT, handle_shutdown)

    try:
        safe_print(f"Listening on port {config.PORT}")
        app.run(host="0.0.0.0", port=config.PORT, threaded=True, use_reloader=False)
    finally:
        runtime.stop()


if __name__ == "__main__":
    main()
