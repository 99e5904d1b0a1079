import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from app.config import DATABASE_URL

logger = logging.getLogger(__name__)

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

DEFAULT_FUNCTION_TYPES = [
    ("Wedding", "wedding"),
    ("Party", "party"),
    ("Family Function", "family-function"),
    ("Birthday Party", "birthday-party"),
    ("Anniversary Celebration", "anniversary"),
    ("Corporate Event", "corporate-event"),
    ("Religious Ceremony", "religious-ceremony"),
    ("Engagement", "engagement"),
    ("Reception", "reception"),
    ("Conference", "conference"),
    ("Workshop", "workshop"),
    ("Cultural Event", "cultural-event"),
]


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    # Import models here to create tables
    from app.models import FunctionType
    Base.metadata.create_all(bind=engine)

    # Seed the function type catalog if empty
    db = SessionLocal()
    try:
        if not db.query(FunctionType).first():
            db.add_all(
                FunctionType(name=name, slug=slug, price=0)
                for name, slug in DEFAULT_FUNCTION_TYPES
            )
            logger.info(f"Seeded {len(DEFAULT_FUNCTION_TYPES)} function types")
        db.commit()
    finally:
        db.close()
