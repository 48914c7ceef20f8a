import asyncio
from menucard.db.session import engine
from menucard.db.base import Base  # imports all models so metadata is populated

async def _init():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

def main():
    asyncio.run(_init())

if __name__ == "__main__":
    main()
