import logging
import os
import sys

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pymongo.database import Database

from database import connect
from errors import register_exception_handlers
from middleware import RequestLoggingMiddleware
from routes import make_router

load_dotenv()

# Config
MONGODB_URI = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
DATABASE_NAME = "geoguessr"
HOST = "0.0.0.0"
PORT = 8080
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

log = logging.getLogger(__name__)


def create_app(db: Database) -> FastAPI:
    app = FastAPI(title="Geoguessr Tracker API")
    # added last runs first, so CORS also wraps 500s built by the request logger
    # last added runs first: CORS wraps the request logger, so 500s built there get CORS headers too
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    app.include_router(make_router(db))
    return app


def main() -> None:
    logging.basicConfig(
        level=LOG_LEVEL, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    )
    try:
        db = connect(MONGODB_URI, DATABASE_NAME)
    except Exception as e:
        log.error(f"Failed to connect to the database: {e}")
        sys.exit(1)

    log.info(f"Server is running on http://localhost:{PORT}")
    uvicorn.run(create_app(db), host=HOST, port=PORT)


if __name__ == "__main__":
    main()
