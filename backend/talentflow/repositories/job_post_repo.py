"""Job Post Repository - Data access for job posts"""
from typing import Any, Dict, List, Optional
from pymongo import DESCENDING, ReturnDocument
from pymongo.client_session import ClientSession
from pymongo.collection import Collection

from .mongo_client import get_collection
from ..domain.models import JobPost
from ..domain.enums import JobPostStatus
from ..domain.errors import JobPostNotFoundError, ConcurrencyError
from ..utils.time import utc_now
from ..utils.logger import get_logger

logger = get_logger(__name__)


class JobPostRepository:
    """Repository for job post operations"""

    def __init__(self):
        self._job_posts: Collection = get_collection("job_posts")

    def create(self, job_post: JobPost) -> JobPost:
        """Create a new job post"""
        # Keep datetimes native so MongoDB can sort on them
        doc = job_post.model_dump()
        doc["_id"] = job_post.job_post_id

        self._job_posts.insert_one(doc)
        logger.info(
            f"Created job post: {job_post.job_post_id}",
            extra={"entity_id": job_post.job_post_id, "tenant_id": job_post.tenant_id}
        )
        return job_post

    def get(self, job_post_id: str, session: Optional[ClientSession] = None) -> Optional[JobPost]:
        """Get job post by ID"""
        doc = self._job_posts.find_one({"job_post_id": job_post_id}, session=session)
        if doc:
            doc.pop("_id", None)
            return JobPost.model_validate(doc)
        return None

    def get_or_raise(self, job_post_id: str) -> JobPost:
        """Get job post by ID or raise error"""
        job_post = self.get(job_post_id)
        if not job_post:
            raise JobPostNotFoundError(
                "Job post not found",
                details={"job_post_id": job_post_id}
            )
        return job_post

    def list_job_posts(
        self,
        tenant_id: Optional[str] = None,
        status: Optional[JobPostStatus] = None,
        created_by: Optional[str] = None,
        skip: int = 0,
        limit: int = 20
    ) -> List[JobPost]:
        """List job posts, newest first"""
        query = self._list_query(tenant_id, status, created_by)
        cursor = self._job_posts.find(query).sort("created_at", DESCENDING).skip(skip).limit(limit)

        job_posts = []
        for doc in cursor:
            doc.pop("_id", None)
            job_posts.append(JobPost.model_validate(doc))
        return job_posts

    def count_job_posts(
        self,
        tenant_id: Optional[str] = None,
        status: Optional[JobPostStatus] = None,
        created_by: Optional[str] = None
    ) -> int:
        return self._job_posts.count_documents(self._list_query(tenant_id, status, created_by))

    @staticmethod
    def _list_query(
        tenant_id: Optional[str],
        status: Optional[JobPostStatus],
        created_by: Optional[str]
    ) -> Dict[str, Any]:
        query: Dict[str, Any] = {}
        if tenant_id:
            query["tenant_id"] = tenant_id
        if status:
            query["status"] = status.value
        if created_by:
            query["created_by.actor_id"] = created_by
        return query

    def update_fields(
        self,
        job_post_id: str,
        updates: Dict[str, Any],
        expected_version: int
    ) -> JobPost:
        """Update editable fields with optimistic concurrency"""
        updates = {k: v for k, v in updates.items() if k not in ("status", "version")}
        updates["updated_at"] = utc_now()
        return self._conditional_update(
            {"job_post_id": job_post_id, "version": expected_version},
            updates,
            job_post_id
        )

    def update_status(
        self,
        job_post_id: str,
        from_status: JobPostStatus,
        to_status: JobPostStatus,
        expected_version: int,
        session: Optional[ClientSession] = None
    ) -> JobPost:
        """Move status only if the document is still at from_status and expected_version"""
        return self._conditional_update(
            {"job_post_id": job_post_id, "status": from_status.value, "version": expected_version},
            {"status": to_status.value, "updated_at": utc_now()},
            job_post_id,
            session=session
        )

    def delete(self, job_post_id: str) -> None:
        """Delete a job post"""
        result = self._job_posts.delete_one({"job_post_id": job_post_id})
        if result.deleted_count == 0:
            raise JobPostNotFoundError("Job post not found", details={"job_post_id": job_post_id})
        logger.info(f"Deleted job post: {job_post_id}", extra={"entity_id": job_post_id})

    def _conditional_update(
        self,
        filter_query: Dict[str, Any],
        updates: Dict[str, Any],
        job_post_id: str,
        session: Optional[ClientSession] = None
    ) -> JobPost:
        result = self._job_posts.find_one_and_update(
            filter_query,
            {"$set": updates, "$inc": {"version": 1}},
            return_document=ReturnDocument.AFTER,
            session=session
        )

        if result is None:
            exists = self._job_posts.find_one({"job_post_id": job_post_id}, session=session)
            if exists:
                raise ConcurrencyError(
                    f"Job post {job_post_id} was modified. Please refresh and try again.",
                    details={"job_post_id": job_post_id}
                )
            raise JobPostNotFoundError("Job post not found", details={"job_post_id": job_post_id})

        result.pop("_id", None)
        logger.info(f"Updated job post: {job_post_id}", extra={"entity_id": job_post_id})
        return JobPost.model_validate(result)
