from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from cutover.core.config import settings

engine = create_async_engine(settings.LEGACY_DATABASE_URL, echo=False, future=True)
AsyncSessionLocal = async_sessionmaker(
    bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)
