# thethought/db/session.py
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from thethought.core.config import settings

db_url = settings.DATABASE_URL

engine_kwargs: dict = {"pool_pre_ping": True}

# Timeouts cortos: si la DB no responde → falla rápido (5s)
if db_url.startswith("postgresql+psycopg"):
    connect_args = {"connect_timeout": 5}
elif db_url.startswith("postgresql+asyncpg"):
    connect_args = {
        "timeout": 5,
        "server_settings": {"client_encoding": "UTF8"},
    }
else:
    # sqlite+aiosqlite: sin pool_size/max_overflow
    connect_args = {}

if db_url.startswith("postgresql"):
    engine_kwargs.update(pool_recycle=300, pool_size=5, max_overflow=10)

engine = create_async_engine(
    db_url,
    connect_args=connect_args,
    **engine_kwargs,
)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            # cualquier error del request descarta lo pendiente
            await session.rollback()
            raise
        finally:
            await session.close()
