"""
Database Bootstrap Script

Creates every table defined in blogverse.models that does not exist yet.
The API does the same on startup; this script is for preparing a database
before the first deploy.

Usage:
    python scripts/init_db.py
"""

import asyncio
import os
import sys

# Add parent directory to Python path so we can import the package
# This allows running the script from any directory
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from blogverse.database import engine
from blogverse.models import Base


async def init_db():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await engine.dispose()
    print("Tables created")


if __name__ == "__main__":
    asyncio.run(init_db())
