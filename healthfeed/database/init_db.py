"""
Database Initialization - Create tables and demo accounts.

The placeholder logins always sign in as a seeded account, so a fresh
database needs one doctor and one user before /add-doctor.json and
/add-user.json can succeed.
"""
from sqlalchemy import insert, select

from healthfeed.core.config import get_settings
from healthfeed.core.logging_config import get_logger
from healthfeed.database.connection import get_database
from healthfeed.database.models import Base, Doctor, User

logger = get_logger(__name__)


def init_tables() -> bool:
    """
    Create the publishing tables if they don't exist.

    Returns:
        True if tables were created successfully
    """
    try:
        db = get_database()
        Base.metadata.create_all(db.engine)
        logger.info("Publishing tables initialized successfully")
        return True

    except Exception as e:
        logger.error(f"Failed to initialize tables: {e}")
        raise


def drop_tables() -> bool:
    """
    Drop the publishing tables (use with caution!).

    This is mainly for testing/development purposes.
    """
    try:
        db = get_database()
        Base.metadata.drop_all(db.engine)
        logger.warning("Publishing tables dropped")
        return True

    except Exception as e:
        logger.error(f"Failed to drop tables: {e}")
        raise


def seed_demo_accounts() -> None:
    """Insert the demo doctor and demo user unless they already exist."""
    settings = get_settings()
    db = get_database()

    with db.get_session() as session:
        doctor_id = session.execute(
            select(Doctor.__table__.c.id).where(Doctor.__table__.c.email == settings.demo_doctor_email)
        ).scalar()
        if doctor_id is None:
            session.execute(
                insert(Doctor.__table__).values(
                    first="Dana",
                    last="Ortiz",
                    email=settings.demo_doctor_email,
                    specialty="Music therapy",
                    bio="Writes about music, sleep and recovery.",
                    doctor=True,
                )
            )
            logger.info(f"Seeded demo doctor {settings.demo_doctor_email}")

        user_id = session.execute(
            select(User.__table__.c.id).where(User.__table__.c.email == settings.demo_user_email)
        ).scalar()
        if user_id is None:
            session.execute(
                insert(User.__table__).values(
                    first="Sam",
                    last="Reader",
                    email=settings.demo_user_email,
                    doctor=False,
                )
            )
            logger.info(f"Seeded demo user {settings.demo_user_email}")


if __name__ == "__main__":
    # Allow running directly to create tables
    print("Initializing publishing tables...")
    init_tables()
    seed_demo_accounts()
    print("Done!")
