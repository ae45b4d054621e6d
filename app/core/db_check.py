import asyncio
import logging
from sqlalchemy import text
from app.db.session import engine

logger = logging.getLogger(__name__)


async def wait_for_db(retries=5, delay=2):
    for i in range(retries):
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            logger.info("Splitter : Database connected")
            return
        except Exception as e:
            logger.warning(f"Splitter : Database not ready | [ {i+1}/{retries} ] {e} → retrying...")
            await asyncio.sleep(delay)

    raise RuntimeError("Database unreachable after retries")
