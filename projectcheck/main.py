from fastapi import FastAPI
from projectcheck.logger import logger
from projectcheck.routers.projects import router as projects_router
from projectcheck.routers.plagiarism import router as plagiarism_router

from fastapi.middleware.cors import CORSMiddleware

app = FastAPI(title="Project Plagiarism Check")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(projects_router)
app.include_router(plagiarism_router)

logger.info("🚀 Plagiarism check service ready")
