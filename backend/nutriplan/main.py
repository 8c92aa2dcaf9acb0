from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from nutriplan.api.routes import router as api_router
from nutriplan.config import settings
from nutriplan.knowledge.seed import seed_knowledge_base
from nutriplan.logging import configure_logging, get_logger
from nutriplan.storage import db

app = FastAPI(title="NutriPlan Knowledge Base API")
logger = get_logger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def on_startup() -> None:
    configure_logging(settings.log_level)
    logger.info("startup: env=%s", settings.env)
    db.create_db_and_tables()
    if settings.seed_knowledge_on_startup:
        with db.get_session() as session:
            seed_knowledge_base(session)


app.include_router(api_router)
