from . import composition
from .logging_config import get_logger
from .wiring import create_app

logger = get_logger(__name__)

# routes only; the engine and mail sender are built in on_startup
app = create_app()


@app.on_event("startup")
async def on_startup():
    app.state.wire_result = await composition.wire_app(app)
    logger.info("startup complete")


@app.on_event("shutdown")
async def on_shutdown():
    wired = getattr(app.state, "wire_result", None)
    if wired is not None:
        await wired.teardown()
    logger.info("shutdown complete")


if __name__ == "__main__":
    import uvicorn

    from .config import settings

    uvicorn.run("flixauth.main:app", host=settings.server_host, port=settings.server_port)
