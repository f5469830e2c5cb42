import uvicorn
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from api.routes import router as api_router
from api.websocket import router as ws_router
from middleware.security import SecurityMiddleware
from services.voice_alert import voice_alerts
from utils.debug import debug_log
import os
import config as cfg


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: render the alert phrase once so the first alert plays instantly
    audio_url = await voice_alerts.generate_audio()
    debug_log(f"[VOICE] Alert audio ready: {audio_url}")
    yield


app = FastAPI(
    title="PostureGuard - Forward Head Posture Detection",
    description="Calibrated, debounced forward head posture alerts from streamed pose landmarks.",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if cfg.ENVIRONMENT == "development" else None,
    redoc_url=None,
    openapi_url="/openapi.json" if cfg.ENVIRONMENT == "development" else None,
)

app.add_middleware(SecurityMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cfg.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["Content-Type"],
    max_age=600,
)


@app.get("/health")
async def health_check():
    return {"status": "healthy", "environment": cfg.ENVIRONMENT}


# Serve cached alert audio
cfg.AUDIO_CACHE_DIR.mkdir(parents=True, exist_ok=True)
app.mount(cfg.AUDIO_URL_PREFIX, StaticFiles(directory=str(cfg.AUDIO_CACHE_DIR)), name="audio")

app.include_router(api_router)
app.include_router(ws_router)

if __name__ == "__main__":
    port = int(os.getenv("PORT", 8000))
    reload = cfg.ENVIRONMENT == "development"
    uvicorn.run("main:app", host="0.0.0.0", port=port, reload=reload)
