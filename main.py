import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from ariadne.asgi import GraphQL
from ariadne.asgi.handlers import GraphQLHTTPHandler
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

import settings
from container import Container
from database import close_mongo_connection, connect_to_mongo
from schema import schema
from util.errors import format_error
from util.middleware import MIDDLEWARE
from utils import bearer_token

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


async def get_context(request: Request, data=None) -> dict:
    """
    GraphQL context: the container plus the (optional) user behind the bearer token
    """
    container: Container = request.app.state.container
    token = bearer_token(request.headers.get("Authorization"))
    user = await container.tokens.resolve_user(token)
    return {
        "request": request,
        "container": container,
        "user": user,
    }


@asynccontextmanager
async def lifespan(app: FastAPI):
    database = await connect_to_mongo()
    app.state.container = Container(database)
    try:
        yield
    finally:
        app.state.container.close()
        await close_mongo_connection()


def create_app() -> FastAPI:
    app = FastAPI(title="GraphStaff", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.FRONTEND_URL],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    graphql_app = GraphQL(
        schema,
        context_value=get_context,
        error_formatter=format_error,
        http_handler=GraphQLHTTPHandler(middleware=MIDDLEWARE),
        debug=False,
    )
    app.mount("/graphql/", graphql_app)

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.error("Unhandled error on %s", request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={"message": "An internal server error occurred"},
        )

    @app.get("/health")
    async def health():
        return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

    @app.get("/", response_class=PlainTextResponse)
    async def index():
        return "GraphStaff API is running. Use /graphql/ for GraphQL queries."

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app=app, host=settings.HOST, port=settings.PORT)
