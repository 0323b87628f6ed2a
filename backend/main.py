"""
FastAPI Backend

Main API server for the MindCase wellness companion: auth, mood tracking,
journaling and the MindBot chat.
"""

# Load .env FIRST, before any other imports that read env vars.
from pathlib import Path
from dotenv import load_dotenv

_project_root = Path(__file__).resolve().parent.parent
_env_file = _project_root / ".env"
if _env_file.exists():
    load_dotenv(dotenv_path=_env_file)
else:
    load_dotenv()  # fallback: current directory

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.app.api import chat, journals, moods
from backend.app.api.deps import get_app_settings
from backend.app.core.auth import local_auth
from backend.app.core.middleware import setup_middleware
from backend.app.observability.logging import setup_logging

settings = get_app_settings()
setup_logging(settings.log_level)
_logger = logging.getLogger(__name__)

if not settings.completion_configured:
    _logger.warning("GROQ_API_KEY not found. Chat messages will fail until it is set in .env")

app = FastAPI(title=f"{settings.app_name} API")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
setup_middleware(app)

app.include_router(local_auth.router)
app.include_router(moods.router)
app.include_router(journals.router)
app.include_router(chat.router)


@app.get("/health")
async def health():
    return {
        "status": "ok",
        "app": settings.app_name,
        "env": settings.app_env,
        "api_key_loaded": settings.completion_configured,
        "model": settings.completion_model,
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=5000)
