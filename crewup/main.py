# crewup/main.py

import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

# ---------------- ENV ----------------
load_dotenv(dotenv_path=os.path.join(os.path.dirname(__file__), ".env"))

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger("crewup")

app = FastAPI(title="CrewUp Backend")

# ---------------- CORS ----------------
origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

frontend_origin = os.getenv("FRONTEND_ORIGIN")
if frontend_origin:
    origins.append(frontend_origin)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------- DATABASE INIT ----------------
from crewup.database import Base, engine  # noqa: E402
from crewup.models.user import User  # noqa: E402,F401
from crewup.models.project_member import ProjectMember  # noqa: E402,F401

logger.info("Checking database models...")
Base.metadata.create_all(bind=engine)
logger.info("Database ready.")

# ---------------- ERRORS ----------------
from crewup.project.errors import StoreError  # noqa: E402
from crewup.responses import store_error_handler  # noqa: E402

app.add_exception_handler(StoreError, store_error_handler)

# ---------------- ROUTERS ----------------
from crewup.auth.auth_router import router as auth_router  # noqa: E402
from crewup.profile.profile_router import router as profile_router  # noqa: E402
from crewup.project.project_router import router as project_router  # noqa: E402

app.include_router(auth_router, prefix="/auth")
app.include_router(profile_router)
app.include_router(project_router)


# ---------------- ROOT ----------------
@app.get("/")
def read_root():
    return {"message": "CrewUp backend running"}
