"""FastAPI application for the to-do list backend."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from todo_app.config import ALLOWED_ORIGINS, HOST, LOG_LEVEL, PORT
from todo_app.routes.tasks import get_storage
from todo_app.routes.tasks import router as tasks_router

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log where tasks are stored; the file itself is created on first access."""
    logger.info("Serving tasks from %s", get_storage().data_file)
    yield


app = FastAPI(title="To-Do List", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_methods=["GET", "POST", "PATCH", "DELETE"],
    allow_headers=["Content-Type"],
)

app.include_router(tasks_router)


@app.get("/api/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "todo-api"}


def run() -> None:
    """Serve the API with uvicorn."""
    import uvicorn

    uvicorn.run(app, host=HOST, port=PORT)


if __name__ == "__main__":
    run()
