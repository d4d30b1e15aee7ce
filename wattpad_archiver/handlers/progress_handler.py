"""
MongoDB handler - story, progress, error và queue collections, keyed by storyId
"""
from pymongo import MongoClient, DESCENDING
from pymongo.errors import PyMongoError

from wattpad_archiver import config
from wattpad_archiver.exceptions import PersistenceError
from wattpad_archiver.models import now_ms
from wattpad_archiver.schemas.progress_schema import PROGRESS_SCHEMA
from wattpad_archiver.schemas.story_schema import STORY_SCHEMA
from wattpad_archiver.utils import safe_print
from wattpad_archiver.utils.validation import validate_against_schema

# Progress record khi không có job nào đang chạy
CLEARED_PROGRESS = {field_name: None for field_name in PROGRESS_SCHEMA}


class ProgressStore:
    """Handler cho progress / error / queue / story documents"""

    def __init__(self, mongo_db, mongo_client=None):
        """
        Args:
            mongo_db: pymongo Database (tests truyền fake database)
            mongo_client: MongoClient để close() khi tắt server
        """
        self.mongo_client = mongo_client
        self.mongo_db = mongo_db
        self.mongo_collection_story = mongo_db[config.COL_STORY]
        self.mongo_collection_progress = mongo_db[config.COL_PROGRESS]
        self.mongo_collection_error = mongo_db[config.COL_ERROR]
        self.mongo_collection_queue = mongo_db[config.COL_QUEUE]

    @classmethod
    def connect(cls, uri=None, db_name=None):
        """Kết nối MongoDB theo config"""
        try:
            client = MongoClient(uri or config.MONGODB_URI)
        except PyMongoError as e:
            raise PersistenceError(f"Không thể kết nối MongoDB: {e}") from e
        safe_print("✅ Đã kết nối MongoDB với 4 collections (story, progress, error, queue)")
        return cls(client[db_name or config.DB_NAME], client)

    def close(self):
        """Đóng kết nối MongoDB"""
        if self.mongo_client:
            self.mongo_client.close()
            safe_print("✅ Đã đóng kết nối MongoDB")

    @staticmethod
    def _execute(action, func, *args, **kwargs):
        try:
            return func(*args, **kwargs)
        except PyMongoError as e:
            raise PersistenceError(f"{action} failed: {e}") from e

    # ========== Write methods ==========

    def report_progress(self, job_id, current, total):
        """Upsert {current, total, timestamp} for an in-flight job"""
        record = validate_against_schema(
            {"current": current, "total": total, "timestamp": now_ms()},
            PROGRESS_SCHEMA,
            strict=True,
        )
        self._execute(
            "report progress",
            self.mongo_collection_progress.update_one,
            {"_id": job_id}, {"$set": record}, upsert=True,
        )

    def clear_progress(self, job_id):
        self._execute(
            "clear progress",
            self.mongo_collection_progress.update_one,
            {"_id": job_id}, {"$set": dict(CLEARED_PROGRESS)}, upsert=True,
        )

    def mark_for_deletion(self, job_id):
        self._execute(
            "set deletion marker",
            self.mongo_collection_queue.update_one,
            {"_id": job_id}, {"$set": {"toDelete": True}}, upsert=True,
        )

    def report_error(self, job_id):
        """
        Failed disposition: error flag, deletion marker, progress cleared.
        Upserts only, so calling it twice leaves the same state as once.
        """
        self._execute(
            "set error flag",
            self.mongo_collection_error.update_one,
            {"_id": job_id}, {"$set": {"errorFound": True}}, upsert=True,
        )
        self.mark_for_deletion(job_id)
        self.clear_progress(job_id)
        safe_print(f"❌ [ERROR] Closing page => {job_id}")

    def report_success(self, job_id):
        """Deletion marker + progress cleared. The error flag is left as is."""
        self.mark_for_deletion(job_id)
        self.clear_progress(job_id)

    def save_story(self, job_id, story):
        """
        Commit the assembled story under story/{job_id}

        Args:
            story: dict theo STORY_SCHEMA (Document.to_dict())
        """
        document = validate_against_schema(story, STORY_SCHEMA, strict=True)
        self._execute(
            "save story",
            self.mongo_collection_story.replace_one,
            {"_id": job_id}, document, upsert=True,
        )
        safe_print(f"✅ [STORY] Success => Id: {job_id}")
        return job_id

    # ========== Read methods ==========

    def get_progress(self, job_id):
        doc = self._execute("read progress", self.mongo_collection_progress.find_one, {"_id": job_id})
        if not doc:
            return None
        return validate_against_schema(doc, PROGRESS_SCHEMA)

    def get_story(self, job_id):
        doc = self._execute("read story", self.mongo_collection_story.find_one, {"_id": job_id})
        if not doc:
            return None
        return validate_against_schema(doc, STORY_SCHEMA)

    def get_status(self, job_id):
        """Tổng hợp trạng thái job cho endpoint /progress"""
        progress = self.get_progress(job_id)
        error = self._execute("read error flag", self.mongo_collection_error.find_one, {"_id": job_id})
        queue = self._execute("read deletion marker", self.mongo_collection_queue.find_one, {"_id": job_id})
        story = self._execute("read story", self.mongo_collection_story.find_one, {"_id": job_id})
        return {
            "progress": progress,
            "error": bool(error and error.get("errorFound")),
            "queue": bool(queue and queue.get("toDelete")),
            "completed": story is not None,
        }

    def find_live_jobs(self, limit=None):
        """
        Job ids with a live (non-null) progress record, most recently updated first

        Args:
            limit: chỉ lấy N job mới nhất (None = tất cả)
        """
        def query():
            cursor = self.mongo_collection_progress.find({"current": {"$ne": None}})
            cursor = cursor.sort("timestamp", DESCENDING)
            if limit:
                cursor = cursor.limit(limit)
            return [doc["_id"] for doc in cursor]

        return self._execute("find live jobs", query)
