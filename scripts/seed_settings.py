import sys, pathlib
sys.path.append(str(pathlib.Path(__file__).resolve().parents[1] / "backend"))

from sqlalchemy import text
from bistro.config import BASE_DIR, settings
from bistro.database import SessionLocal, engine
from bistro.models import Base
from bistro.services.seed import seed_reservation_settings


def main():
    if settings.database_url.startswith("sqlite:///./"):
        (BASE_DIR / "data").mkdir(exist_ok=True)

    Base.metadata.create_all(engine)

    db = SessionLocal()
    try:
        print("DB OK:", db.execute(text("SELECT 1")).scalar())
        inserted = seed_reservation_settings(db)
        print("Inserted settings:", ", ".join(inserted) or "none")
    finally:
        db.close()


if __name__ == "__main__":
    main()
