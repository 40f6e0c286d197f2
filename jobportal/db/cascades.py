"""Multi-table deletes that must respect foreign key order.

These helpers only stage deletes on the given session; the caller commits
once so the whole cascade lands (or rolls back) as a single transaction.
"""

from sqlalchemy.orm import Session

from jobportal.db.tables import Application, Job, Profile, SavedJob, User


def delete_jobs(db: Session, job_ids: list[str]) -> int:
    """Delete jobs along with their applications and saved-job entries."""
    if not job_ids:
        return 0
    db.query(Application).filter(Application.job_id.in_(job_ids)).delete(synchronize_session=False)
    db.query(SavedJob).filter(SavedJob.job_id.in_(job_ids)).delete(synchronize_session=False)
    return db.query(Job).filter(Job.id.in_(job_ids)).delete(synchronize_session=False)


def delete_user(db: Session, user: User) -> None:
    """Delete a user and everything that references them."""
    db.query(Application).filter(Application.user_id == user.id).delete(synchronize_session=False)
    db.query(SavedJob).filter(SavedJob.user_id == user.id).delete(synchronize_session=False)

    job_ids = [job_id for (job_id,) in db.query(Job.id).filter(Job.recruiter_id == user.id).all()]
    delete_jobs(db, job_ids)

    profile = db.query(Profile).filter(Profile.user_id == user.id).first()
    if profile:
        # ORM delete so experience and education rows go with it
        db.delete(profile)
        db.flush()

    db.delete(user)
