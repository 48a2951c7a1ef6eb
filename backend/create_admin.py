"""
Seed Script
Creates the tables and a demo company with an admin user, unless that user already exists
"""
import logging

from app.core.database import SessionLocal, init_db
from app.core.security import get_password_hash
from app.models import Company, User, UserRole

logger = logging.getLogger("create_admin")

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "password123"


def create_admin_user(db) -> User:
    existing = db.query(User).filter(User.email == ADMIN_EMAIL).first()
    if existing:
        logger.info("Admin user already exists")
        return existing

    company = Company(
        name="Demo Company",
        legal_name="Demo Company Ltd.",
        currency="INR",
        timezone="Asia/Kolkata"
    )
    db.add(company)
    db.flush()

    admin = User(
        email=ADMIN_EMAIL,
        hashed_password=get_password_hash(ADMIN_PASSWORD),
        first_name="Admin",
        last_name="User",
        role=UserRole.ADMIN.value,
        is_active=True,
        company_id=company.id
    )
    db.add(admin)
    db.commit()

    logger.info("Admin user created successfully:")
    logger.info(f"Email: {ADMIN_EMAIL}")
    logger.info(f"Password: {ADMIN_PASSWORD}")
    logger.info(f"Company: {company.name} (ID {company.id}), User ID: {admin.id}")
    return admin


def main():
    logging.basicConfig(level=logging.INFO)
    init_db()
    db = SessionLocal()
    try:
        create_admin_user(db)
    except Exception:
        db.rollback()
        logger.exception("Error creating admin user")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
