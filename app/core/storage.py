"""
Supabase access.

Document files live in a Storage bucket; the same project's tables are read
directly when the HRMS API is unavailable (see app.clients.hrms_client).
supabase-py is synchronous, callers on the event loop go through a thread.
"""
import uuid
from typing import Optional

from app.config import settings


class StorageClient:
    """Lazily created Supabase client shared by storage and table reads."""

    _client = None

    @classmethod
    def get_client(cls):
        if cls._client is None:
            if not settings.SUPABASE_URL or not settings.SUPABASE_SERVICE_KEY:
                raise ValueError(
                    "Document storage is not configured. "
                    "Set SUPABASE_URL and SUPABASE_SERVICE_KEY."
                )
            from supabase import create_client

            cls._client = create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_KEY)
        return cls._client

    @classmethod
    def upload(cls, content: bytes, path: str, content_type: str) -> str:
        """
        Store a document in the bucket.

        Args:
            content: File bytes
            path: Object path inside the bucket
            content_type: MIME type sent with the object

        Returns:
            Public URL of the stored object
        """
        bucket = cls.get_client().storage.from_(settings.SUPABASE_STORAGE_BUCKET)
        bucket.upload(
            path=path,
            file=content,
            file_options={"content-type": content_type, "upsert": "true"}
        )
        return bucket.get_public_url(path)

    @staticmethod
    def generate_unique_filename(original_filename: str, prefix: str = "") -> str:
        """Random object name keeping the original extension, e.g. `<prefix>/3f9c0a1b2d4e.pdf`."""
        ext = ""
        if "." in original_filename:
            ext = "." + original_filename.rsplit(".", 1)[1].lower()

        name = f"{uuid.uuid4().hex[:12]}{ext}"
        return f"{prefix}/{name}" if prefix else name

    @classmethod
    def select_rows(
        cls,
        table: str,
        filters: Optional[dict] = None,
        order_by: Optional[str] = None,
    ) -> list[dict]:
        """Rows of `table` matching every equality filter, newest `order_by` first."""
        query = cls.get_client().table(table).select("*")
        for column, value in (filters or {}).items():
            query = query.eq(column, str(value))
        if order_by:
            query = query.order(order_by, desc=True)
        return query.execute().data
