from dotenv import load_dotenv

from neighborswap.application.services.seed_service import SeedService
from neighborswap.core.config import Settings
from neighborswap.core.logging import configure_logging
from neighborswap.infrastructure.persistence.sqlite import SQLitePersistence


def main() -> None:
    load_dotenv()
    configure_logging()
    settings = Settings()
    persistence = SQLitePersistence(settings.database_path)
    try:
        count = SeedService(persistence, bcrypt_rounds=settings.bcrypt_rounds).seed()
    finally:
        persistence.close()

    if count:
        print(f"Seeded {count} demo listings into {settings.database_path}")
    else:
        print("Database already seeded.")


if __name__ == "__main__":
    main()
