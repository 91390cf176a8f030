# main.py
from dotenv import load_dotenv
load_dotenv()

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from genmed.container import get_settings
from genmed.presentation.routers import router

# --- logging config before anything logs ---
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

# own request logger, not uvicorn.access
app_logger = logging.getLogger("genmed.request")

settings = get_settings()

app = FastAPI(
    title="Generic Medicine Finder",
    version=settings.app_version,
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    app_logger.info(f"➡️ Incoming {request.method} {request.url.path}")
    try:
        response = await call_next(request)
        app_logger.info(f"⬅️ Completed {request.method} {request.url.path} -> {response.status_code}")
        return response
    except Exception:
        app_logger.exception(f"❌ Unhandled error on {request.method} {request.url.path}")
        raise

# ─────────────────────────────────────────────────────────────
# CORS (env: CORS_ALLOW_ORIGINS="https://foo.com,https://bar.com")
# ─────────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials="*" not in settings.cors_allow_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ─────────────────────────────────────────────────────────────
# Routes
# ─────────────────────────────────────────────────────────────
app.include_router(router, tags=["api"])


@app.get("/")
async def root():
    return {
        "name": "Generic Medicine Finder",
        "version": settings.app_version,
        "ok": True,
    }


if __name__ == "__main__":
    import uvicorn

    app_logger.info("🏥 Generic Medicine Finder running at http://localhost:%s", settings.port)
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
