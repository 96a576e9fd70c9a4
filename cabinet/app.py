"""FastAPI application serving saved topology snippets."""

import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cabinet import snippet_db
from cabinet.snippet_routes import router as snippet_router

load_dotenv()

log = logging.getLogger("cabinet")

# comma-separated origins; "*" allows any
CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",")]


@asynccontextmanager
async def lifespan(app: FastAPI):
    snippet_db.init_db()
    log.info("snippet store ready at %s", snippet_db.SNIPPET_DB_PATH)
    yield


app = FastAPI(
    title="Cabinet API",
    description="Snippet store for saved network topologies",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "DELETE"],
    allow_headers=["*"],
)

app.include_router(snippet_router)


@app.get("/")
def root():
    return {"status": "ok", "service": "cabinet", "snippets": "/snippets"}


def main() -> None:
    import uvicorn

    host = os.getenv("CABINET_HOST", "127.0.0.1")
    port = int(os.getenv("CABINET_PORT", "8000"))
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
