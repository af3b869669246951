# scripts/init_db.py
import sys
from pathlib import Path

# Ensure project root is on the path when running this script directly
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import asyncio
from sqlalchemy import text

from registrar.config.settings import get_settings
from registrar.infrastructure.database.session import build_engine, create_schema


async def init_db():
    engine = build_engine(get_settings().database_url)
    async with engine.begin() as conn:
        result = await conn.execute(text("SELECT 1"))
        print("DB Connected:", result.scalar())
    await create_schema(engine)
    print("Schema ready: student, course_offering, enrollment, enrollment_audit")
    await engine.dispose()

asyncio.run(init_db())
