import uvicorn

from tracker.app import create_app
from tracker.config import settings

app = create_app(settings)


def run():
    uvicorn.run("tracker.main:app", host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
