import logging

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from agv_rebrand.api.routes.agv import router as agv_router
from agv_rebrand.api.routes.health import router as health_router
from agv_rebrand.config import settings
from agv_rebrand.storage.local import public_root


def create_app() -> FastAPI:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = FastAPI(title=settings.app_name)

    app.include_router(health_router)
    app.include_router(agv_router)
    app.mount(
        "/" + settings.public_url_prefix.strip("/"),
        StaticFiles(directory=str(public_root())),
        name="public",
    )
    return app


app = create_app()
