from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import uvicorn

from studywise.apis.errors import register_exception_handlers
from studywise.apis.flows.main import router as flows_router
from studywise.apis.workspaces.main import router as workspaces_router
from studywise.core.config import settings
from studywise.core.logging import setup_logging


def create_app() -> FastAPI:
    setup_logging()
    app = FastAPI(title=settings.app.name, version=settings.app.version)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.app.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(flows_router)
    app.include_router(workspaces_router)

    @app.get("/")
    async def root():
        return {
            "status": "ok",
            "app": settings.app.name,
            "version": settings.app.version,
        }

    return app


app = create_app()


if __name__ == "__main__":
    try:
        uvicorn.run(
            "main:app",
            host="0.0.0.0",
            port=settings.app.port,
            reload=not settings.app.is_production,
        )
    except Exception as e:
        print(f"An error occurred when starting the server: {e}.")
