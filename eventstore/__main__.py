import uvicorn
from .config import get_settings


def main():
    settings = get_settings()
    uvicorn.run(
        "eventstore.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=settings.SERVICE_PORT,
        log_config=None,
    )


if __name__ == "__main__":
    main()
