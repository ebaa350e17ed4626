import logging
from thethought.db.session import engine
from thethought.db.base import Base

# 👇 importa todos los modelos que deben existir en la DB
from thethought.users.models import User, Follow  # noqa: F401
from thethought.profile.models import Profile  # noqa: F401
from thethought.posts.models import Post, PostLike, PostShare, PostComment  # noqa: F401
from thethought.reels.models import Reel, ReelLike, ReelShare, ReelComment  # noqa: F401
from thethought.messages.models import Message  # noqa: F401

log = logging.getLogger("uvicorn")


async def init_models(bind=None):
    """
    Crea/verifica todas las tablas declaradas en Base.metadata
    """
    try:
        async with (bind or engine).begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        log.info("✅ DB init: tablas creadas/verificadas.")
    except Exception as e:
        log.error(f"❌ DB init falló: {e!r}")
        raise
