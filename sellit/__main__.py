"""Run the API with uvicorn: ``python -m sellit``."""

import uvicorn

from sellit.config import settings


def main() -> None:
    uvicorn.run("sellit.main:app", host="0.0.0.0", port=settings.port, reload=settings.debug)


if __name__ == "__main__":
    main()
