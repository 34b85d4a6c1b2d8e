import asyncio
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from infrastructure.database.database import create_tables, drop_tables, engine  # noqa: E402

logger = logging.getLogger("reset_state")


async def reset_database() -> None:
    logger.info("Dropping labeling tables...")
    await drop_tables()

    logger.info("Recreating labeling tables...")
    await create_tables()

    await engine.dispose()


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    asyncio.run(reset_database())
    logger.info("Label and category indices reset.")


if __name__ == "__main__":
    main()
