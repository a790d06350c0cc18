"""
FastAPI application entry point.

Sets up the application with:
- Lifespan management (startup/shutdown)
- Route registration
- Middleware configuration
- Error handling
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.routes import health_router, messages_router
from core.config import Settings, settings as default_settings
from core.logging import configure_logging, get_logger
from core.storage import open_record_store
from manager.message_service import MessageService


logger = get_logger(__name__)


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """
    Application factory.

    Creates and configures the FastAPI application. The record store
    is opened when the app starts and closed when it stops.
    """
    app_settings = app_settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """
        应用程序生命周期管理器。

        处理启动和关闭:
        - 启动: 打开 Record Store, 创建消息服务
        - 关闭: 关闭 Record Store（写入已持久化，重启后数据保持不变）
        """
        configure_logging(app_settings)

        logger.info(
            "Starting message board service...",
            storage_backend=app_settings.storage_backend,
        )

        async with open_record_store(app_settings) as store:
            app.state.record_store = store
            app.state.message_service = MessageService(store)

            logger.info(
                "Message board service started",
                host=app_settings.server_host,
                port=app_settings.server_port,
                storage_backend=app_settings.storage_backend,
                messages=await store.count(),
            )

            yield

            # =========================================
            # Shutdown
            # =========================================
            logger.info("Shutting down message board service...")
            app.state.message_service = None
            app.state.record_store = None

        logger.info("Message board service stopped")

    app = FastAPI(
        title="Message Board",
        description=(
            "Message board backend.\n\n"
            "Create, read, update, delete and search short text messages, "
            "persisted in a durable ordered record store."
        ),
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = app_settings

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register routes
    app.include_router(health_router)
    app.include_router(messages_router)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error",
                "message": str(exc) if app_settings.debug else "An error occurred",
            },
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.server:app",
        host=default_settings.server_host,
        port=default_settings.server_port,
        reload=default_settings.debug,
    )
