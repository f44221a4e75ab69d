import asyncio
import sys
from pathlib import Path

# Add project root to sys.path
project_root = Path(__file__).resolve().parent.parent
sys.path.append(str(project_root))

from reservas.bootstrap import build_engine  # noqa: E402
from reservas.config import get_settings  # noqa: E402
from reservas.logging_config import configure_logging  # noqa: E402


async def sync():
    settings = get_settings()
    configure_logging(settings.log_level)
    engine = build_engine(settings)

    result = await engine["sync_feed"].execute()
    if not result.ok:
        print(f"Sync failed ({result.error.reason}): {result.error.message}")
        return 1

    merge = result.merge
    print(f"Imported {merge.imported} rows (replaced {merge.replaced}, skipped {merge.skipped}).")
    published = await engine["publish_changes"].execute()
    print(f"Published {published} pending changes.")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(sync()))
