"""
Create database tables
Run: python -m manzana.scripts.init_db
"""
import logging
from sqlmodel import SQLModel
from manzana.db.session import engine
from manzana import models  # noqa: F401  registers tables

logger = logging.getLogger(__name__)


def create_tables():
    SQLModel.metadata.create_all(engine)


def main():
    logging.basicConfig(level=logging.INFO)
    logger.info("Creating tables...")
    create_tables()
    logger.info("Done!")


if __name__ == "__main__":
    main()
