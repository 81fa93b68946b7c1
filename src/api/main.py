import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.routes.action_items import router as action_items_router
from src.api.routes.documents import router as documents_router
from src.api.routes.meetings import router as meetings_router
from src.api.routes.projects import router as projects_router
from src.api.routes.query import router as query_router
from src.api.routes.sessions import router as sessions_router
from src.config import settings

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Meeting Chat API",
    description="Access-filtered retrieval over meetings, tasks, and documents",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
    ],
    allow_origin_regex=r"https://.*\.vercel\.app|http://localhost:\d+",
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(query_router)
app.include_router(action_items_router)
app.include_router(documents_router)
app.include_router(meetings_router)
app.include_router(projects_router)
app.include_router(sessions_router)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "healthy"}
