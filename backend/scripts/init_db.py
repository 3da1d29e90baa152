"""Initialize the database tables and the local storage buckets."""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.config import settings
from app.database import engine, Base
from app.utils.helpers import bucket_root
import app.models  # noqa: F401 - registers all models


def init_db():
    print(f"Creating tables on {settings.DATABASE_URL} ...")
    Base.metadata.create_all(bind=engine)
    for bucket in (settings.DOCUMENTS_BUCKET, settings.RESOURCES_BUCKET):
        os.makedirs(bucket_root(bucket), exist_ok=True)
        print(f"Storage bucket ready: {bucket_root(bucket)}")
    print("Database initialized successfully.")


if __name__ == "__main__":
    init_db()
