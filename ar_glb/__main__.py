import uvicorn

from ar_glb.config import settings


def main() -> None:
    uvicorn.run("ar_glb.main:app", host="0.0.0.0", port=settings.PORT)


if __name__ == "__main__":
    main()
