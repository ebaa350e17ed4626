# thethought/main.py
import os
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from thethought.core.json import UTF8JSONResponse
from thethought.core.config import settings
from thethought.core.errors import register_exception_handlers
from thethought.db.init_db import init_models

# routers
from thethought.users.router import router as users_router
from thethought.posts.router import router as posts_router
from thethought.reels.router import router as reels_router
from thethought.messages.router import router as messages_router

log = logging.getLogger("uvicorn")

app = FastAPI(
    title="TheThought API",
    default_response_class=UTF8JSONResponse,
)

register_exception_handlers(app)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allow_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# directorios
os.makedirs(settings.MEDIA_DIR, exist_ok=True)

# montar media (videos de reels y avatars)
app.mount("/media", StaticFiles(directory=settings.MEDIA_DIR, html=False), name="media")


@app.middleware("http")
async def json_charset(request: Request, call_next):
    response = await call_next(request)
    # content-type ya viene con charset por UTF8JSONResponse,
    # pero si otra response lo quitó, lo restauramos:
    ct = response.headers.get("content-type", "")
    if ct.startswith("application/json") and "charset=" not in ct:
        response.headers["content-type"] = "application/json; charset=utf-8"
    return response


@app.on_event("startup")
async def on_startup():
    log.info("🚀 Iniciando servicio…")
    await init_models()
    log.info("✅ Startup listo.")


@app.get("/api/health/")
async def health():
    # incluye emojis para testear transporte UTF-8
    return {"ok": True, "service": "thethought", "msg": "healthy ✨💭"}


# routers
app.include_router(users_router)     # /api/users/...
app.include_router(posts_router)     # /api/posts/...
app.include_router(reels_router)     # /api/reels/...
app.include_router(messages_router)  # /api/messages/...
