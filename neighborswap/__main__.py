import uvicorn

from .core.config import Settings


def main() -> None:
    settings = Settings()
    uvicorn.run("neighborswap.main:app", host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
