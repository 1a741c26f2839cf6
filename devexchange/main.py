import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse

from devexchange.core.config import settings
from devexchange.core.database import init_db
from devexchange.core.errors import register_exception_handlers
from devexchange.routes.admin.admin_routers import admin_router
from devexchange.routes.auth.auth_routers import auth_router
from devexchange.routes.category.category_routers import category_router
from devexchange.routes.connection.connection_routers import connection_router
from devexchange.routes.email.email_routers import email_router
from devexchange.routes.quiz.quiz_routers import USER_ID_HEADER, quiz_router
from devexchange.routes.statistics.statistics_routers import statistics_router
from devexchange.routes.upload.upload_routers import upload_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logging.getLogger("httpx").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("%s started", settings.APP_NAME)
    yield


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=[USER_ID_HEADER],
)

register_exception_handlers(app)

app.include_router(auth_router)
app.include_router(admin_router)
app.include_router(category_router)
app.include_router(quiz_router)
app.include_router(statistics_router)
app.include_router(upload_router)
app.include_router(connection_router)
app.include_router(email_router)


@app.get("/", response_class=HTMLResponse)
async def read_root():
    return """
    <html>
        <head>
            <title>DevExchange</title>
        </head>
        <body>
            <h1>DevExchange API</h1>
            <p>See the API documentation <a href="/docs">here</a>.</p>
        </body>
    </html>
    """


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("devexchange.main:app", host="0.0.0.0", port=8000, reload=False)
