import uvicorn

from agv_rebrand.config import settings


def main() -> None:
    uvicorn.run("agv_rebrand.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
