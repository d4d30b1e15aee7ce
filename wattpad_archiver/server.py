"""
HTTP layer - job intake, job status, PDF and EPUB downloads
"""

import os

from flask import Flask, Response, jsonify, request, send_file
from flask_cors import CORS

from wattpad_archiver import config
from wattpad_archiver.exceptions import EpubGenerationError, InvalidJobError, PersistenceError, ScrapeError
from wattpad_archiver.models import Job
from wattpad_archiver.services.epub_service import build_epub
from wattpad_archiver.utils import safe_print
from wattpad_archiver.utils.file_utils import schedule_file_removal
from wattpad_archiver.utils.url_utils import is_http_url
from wattpad_archiver.utils.validation import check_required_fields

MAX_BODY_BYTES = 50 * 1024 * 1024


def create_app(runtime, archive_dir=None):
    """
    Args:
        runtime: ScraperRuntime (submit, render_pdf, store)
        archive_dir: thư mục tạm cho EPUB (default config.ARCHIVE_DIR)
    """
    app = Flask(__name__)
    CORS(app)
    app.config["MAX_CONTENT_LENGTH"] = MAX_BODY_BYTES
    app.config["ARCHIVE_DIR"] = archive_dir or config.ARCHIVE_DIR

    @app.route('/', methods=['POST'])
    def start_scraping():
        try:
            job = Job.from_payload(request.get_json(silent=True))
        except InvalidJobError as e:
            return jsonify({"error": str(e)}), 400

        runtime.submit(job)
        # Kết quả chỉ xem được qua /progress (fire-and-forget)
        return jsonify({"url": job.job_id}), 202

    @app.route('/progress/<job_id>', methods=['GET'])
    def get_progress(job_id):
        try:
            return jsonify(runtime.store.get_status(job_id))
        except PersistenceError as e:
            safe_print(f"⚠️ Không đọc được trạng thái {job_id}: {e}")
            return jsonify({"error": str(e)}), 503

    @app.route('/pdf', methods=['POST'])
    def generate_pdf():
        payload = request.get_json(silent=True) or {}
        pdf_url = payload.get("url")
        if not is_http_url(pdf_url):
            return jsonify({"error": "url must be an http(s) URL"}), 400

        try:
            buffer = runtime.render_pdf(pdf_url)
        except ScrapeError as e:
            safe_print(f"❌ [PDF] Failed => {pdf_url}: {e}")
            return jsonify({"error": str(e)}), 500
        return Response(buffer, mimetype="application/pdf")

    @app.route('/epub', methods=['POST'])
    def generate_epub():
        payload = request.get_json(silent=True) or {}
        is_valid, missing = check_required_fields(payload, ["title", "author", "content"])
        if not is_valid:
            return jsonify({"error": f"Missing required fields: {missing}"}), 400
        if not isinstance(payload["title"], str) or not isinstance(payload["author"], str):
            return jsonify({"error": "title and author must be strings"}), 400
        if not isinstance(payload["content"], list) or not payload["content"]:
            return jsonify({"error": "content must be a non-empty list"}), 400

        try:
            file_path = build_epub(
                payload["title"],
                payload["author"],
                payload["content"],
                output_dir=app.config["ARCHIVE_DIR"],
            )
        except EpubGenerationError as e:
            safe_print(f"❌ [EPUB] Failed => {payload.get('url')}: {e}")
            return jsonify({"error": str(e)}), 500

        safe_print(f"✅ [EPUB] Success => Id: {payload.get('url')}")
        response = send_file(
            os.path.abspath(file_path),
            mimetype="application/epub+zip",
            as_attachment=True,
            download_name=os.path.basename(file_path),
        )
        # Xóa file local vài giây sau khi download xong
        response.call_on_close(lambda: schedule_file_removal(file_path, config.EPUB_CLEANUP_DELAY))
        return response

    return app
