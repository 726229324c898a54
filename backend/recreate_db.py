"""
Script to recreate the database schema and seed demo data
"""
import logging

from warehouse_payments.core.database import SessionLocal, engine
from warehouse_payments.models import Base
from warehouse_payments.services.seed import seed_demo


logger = logging.getLogger("recreate_db")


def recreate_db():
    logger.info("Dropping existing tables...")
    Base.metadata.drop_all(bind=engine)

    logger.info("Creating tables...")
    Base.metadata.create_all(bind=engine)

    logger.info("Seeding demo data...")
    db = SessionLocal()
    try:
        seed_demo(db)
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

    logger.info("Database recreated successfully")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    recreate_db()
