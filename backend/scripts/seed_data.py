"""
Seed Data Script - Creates sample job posts for local testing
Run: python -m scripts.seed_data

Posts are created as DRAFT and published through the regular service, so
each one gets a DRAFT -> OPEN audit record like any published post.
"""
from talentflow.repositories.mongo_client import get_collection, create_indexes
from talentflow.domain.models import ActorContext, JobPostFields, Location, Skill
from talentflow.domain.enums import Role
from talentflow.services.job_post_service import JobPostService
from talentflow.utils.logger import setup_logging, get_logger

logger = get_logger(__name__)

SEED_ACTOR = ActorContext(
    actor_id="seed-hiring-manager",
    email="seed.hm@example.com",
    role=Role.HIRING_MANAGER,
    tenant_id="seed-organization",
)

SAMPLE_JOB_POSTS = [
    JobPostFields(
        title="Senior Backend Engineer",
        company="Etalente Labs",
        job_type="Full-time",
        description="Design and run the services behind our hiring platform.",
        location=Location(city="Cape Town", country_code="ZA", region="Western Cape"),
        remote="Hybrid",
        salary="Competitive",
        experience_level="Senior",
        responsibilities=["Own API design", "Review code", "Mentor engineers"],
        qualifications=["5+ years Python", "MongoDB in production"],
        skills=[Skill(name="Python", level="Expert", keywords=["FastAPI", "pydantic"])],
    ),
    JobPostFields(
        title="Technical Recruiter",
        company="Etalente Labs",
        job_type="Contract",
        description="Source and screen engineering candidates.",
        location=Location(city="Johannesburg", country_code="ZA", region="Gauteng"),
        remote="On-site",
        experience_level="Mid",
        responsibilities=["Run screening calls", "Coordinate interviews"],
        qualifications=["2+ years technical recruiting"],
    ),
    JobPostFields(
        title="Data Analyst",
        company="Etalente Labs",
        job_type="Full-time",
        description="Turn hiring funnel data into decisions.",
        location=Location(city="Durban", country_code="ZA", region="KwaZulu-Natal"),
        remote="Remote",
        experience_level="Junior",
        skills=[Skill(name="SQL", level="Intermediate")],
    ),
]


def seed_job_posts() -> None:
    """Create and publish the sample job posts unless any already exist"""
    if get_collection("job_posts").count_documents({"tenant_id": SEED_ACTOR.tenant_id}) > 0:
        print("Seed job posts already exist. Skipping seed.")
        return

    service = JobPostService()
    for fields in SAMPLE_JOB_POSTS:
        job_post = service.create_job_post(fields, SEED_ACTOR)
        service.publish(job_post.job_post_id, SEED_ACTOR)
        logger.info(f"Seeded job post: {job_post.title}", extra={"entity_id": job_post.job_post_id})
        print(f"  Created and published: {job_post.title} ({job_post.job_post_id})")


if __name__ == "__main__":
    setup_logging()
    create_indexes()
    print("Seeding job posts...")
    seed_job_posts()
    print("Done.")
