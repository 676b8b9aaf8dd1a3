import logging

from sqlalchemy_utils import create_database, database_exists

from vidshare.core.config.settings import settings
from vidshare.core.database.base import Base
from vidshare.core.database.connection import SessionLocal, engine

# Import all models to ensure they are registered
import vidshare.core.jobs.models
from vidshare.features.catalog.data.sql_models import CategoryModel

logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    ("Gaming", "gamepad"),
    ("Music", "music"),
    ("Education", "graduation-cap"),
    ("Sports", "futbol"),
    ("News", "newspaper"),
]


def setup_database():
    if not database_exists(engine.url):
        create_database(engine.url)
        logger.info(f"Created database {engine.url.database}")

    Base.metadata.create_all(bind=engine)
    settings.ensure_dirs()

    with SessionLocal() as db:
        existing = {name for (name,) in db.query(CategoryModel.name).all()}
        for name, icon in DEFAULT_CATEGORIES:
            if name not in existing:
                db.add(CategoryModel(name=name, icon=icon))
                logger.info(f"Seeded category {name}")
        db.commit()


if __name__ == "__main__":
    setup_database()
    logger.info("Database ready.")
