"""Application Repository - Data access for job applications"""
from typing import Any, Dict, List, Optional
from pymongo import DESCENDING, ReturnDocument
from pymongo.client_session import ClientSession
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError

from .mongo_client import get_collection
from ..domain.models import JobApplication
from ..domain.enums import ApplicationStatus
from ..domain.errors import ApplicationNotFoundError, ConcurrencyError, ValidationError
from ..utils.time import utc_now
from ..utils.logger import get_logger

logger = get_logger(__name__)


class ApplicationRepository:
    """Repository for job application operations"""

    def __init__(self):
        self._applications: Collection = get_collection("job_applications")

    def create(self, application: JobApplication) -> JobApplication:
        """Create an application (one per candidate and job post)"""
        doc = application.model_dump()
        doc["_id"] = application.application_id

        try:
            self._applications.insert_one(doc)
        except DuplicateKeyError:
            raise ValidationError(
                "You have already applied for this job.",
                details={"job_post_id": application.job_post_id}
            )

        logger.info(
            f"Created application: {application.application_id}",
            extra={"entity_id": application.application_id, "tenant_id": application.tenant_id}
        )
        return application

    def get(
        self,
        application_id: str,
        session: Optional[ClientSession] = None
    ) -> Optional[JobApplication]:
        """Get application by ID"""
        doc = self._applications.find_one({"application_id": application_id}, session=session)
        if doc:
            doc.pop("_id", None)
            return JobApplication.model_validate(doc)
        return None

    def get_or_raise(self, application_id: str) -> JobApplication:
        """Get application by ID or raise error"""
        application = self.get(application_id)
        if not application:
            raise ApplicationNotFoundError(
                "Application not found",
                details={"application_id": application_id}
            )
        return application

    def exists_for_candidate(self, candidate_id: str, job_post_id: str) -> bool:
        """Check whether the candidate already applied to the job post"""
        return self._applications.count_documents(
            {"candidate_id": candidate_id, "job_post_id": job_post_id},
            limit=1
        ) > 0

    def list_applications(
        self,
        candidate_id: Optional[str] = None,
        job_post_id: Optional[str] = None,
        skip: int = 0,
        limit: int = 20
    ) -> List[JobApplication]:
        """List applications, most recent first"""
        query = self._list_query(candidate_id, job_post_id)
        cursor = self._applications.find(query).sort("application_date", DESCENDING).skip(skip).limit(limit)

        applications = []
        for doc in cursor:
            doc.pop("_id", None)
            applications.append(JobApplication.model_validate(doc))
        return applications

    def count_applications(
        self,
        candidate_id: Optional[str] = None,
        job_post_id: Optional[str] = None
    ) -> int:
        return self._applications.count_documents(self._list_query(candidate_id, job_post_id))

    @staticmethod
    def _list_query(candidate_id: Optional[str], job_post_id: Optional[str]) -> Dict[str, Any]:
        query: Dict[str, Any] = {}
        if candidate_id:
            query["candidate_id"] = candidate_id
        if job_post_id:
            query["job_post_id"] = job_post_id
        return query

    def update_status(
        self,
        application_id: str,
        from_status: ApplicationStatus,
        to_status: ApplicationStatus,
        expected_version: int,
        session: Optional[ClientSession] = None
    ) -> JobApplication:
        """Move status only if the document is still at from_status and expected_version"""
        result = self._applications.find_one_and_update(
            {
                "application_id": application_id,
                "status": from_status.value,
                "version": expected_version,
            },
            {"$set": {"status": to_status.value, "updated_at": utc_now()}, "$inc": {"version": 1}},
            return_document=ReturnDocument.AFTER,
            session=session
        )

        if result is None:
            exists = self._applications.find_one({"application_id": application_id}, session=session)
            if exists:
                raise ConcurrencyError(
                    f"Application {application_id} was modified. Please refresh and try again.",
                    details={"application_id": application_id}
                )
            raise ApplicationNotFoundError(
                "Application not found",
                details={"application_id": application_id}
            )

        result.pop("_id", None)
        logger.info(f"Updated application: {application_id}", extra={"entity_id": application_id})
        return JobApplication.model_validate(result)
