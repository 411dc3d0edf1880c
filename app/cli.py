from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from loguru import logger

from app.config import VODBRIDGE_HOST, VODBRIDGE_PORT, VODBRIDGE_RELOAD


def run_server(app_obj):
    """Run the Uvicorn server with sensible defaults.

    - Reload is off unless VODBRIDGE_RELOAD is set
    - Packaged (frozen) runs never reload
    """
    import uvicorn

    is_frozen = getattr(sys, "frozen", False) or hasattr(sys, "_MEIPASS")
    reload_env = os.environ.get("VODBRIDGE_RELOAD")
    if reload_env is not None:
        reload_flag = reload_env == "1" or reload_env.lower() == "true"
    else:
        reload_flag = VODBRIDGE_RELOAD
    reload_flag = reload_flag and not is_frozen

    if reload_flag:
        logger.info("Uvicorn reload enabled (development mode).")
        uvicorn.run(
            "app.main:app",
            host=VODBRIDGE_HOST,
            port=VODBRIDGE_PORT,
            reload=True,
        )
    else:
        logger.info("Uvicorn reload disabled.")
        uvicorn.run(
            app_obj,
            host=VODBRIDGE_HOST,
            port=VODBRIDGE_PORT,
            reload=False,
        )


def import_metainfo(path: str) -> int:
    """Validate a metadata index JSON file and store it under METAINFO_KEY.

    Returns:
        int: Number of folders in the stored index.

    Raises:
        ValueError: If the file is not a valid metadata index.
    """
    from app.config import METAINFO_KEY
    from app.core.metainfo import MetaInfo
    from app.db import SqlGlobalValueStore, create_db_and_tables

    raw = Path(path).read_text(encoding="utf-8")
    meta = MetaInfo.from_json(raw)
    create_db_and_tables()
    SqlGlobalValueStore().set_global_value(METAINFO_KEY, raw)
    logger.success(f"Imported metadata index with {len(meta)} folders from {path}")
    return len(meta)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="vodbridge")
    sub = parser.add_subparsers(dest="command")
    sub.add_parser("serve", help="run the HTTP server (default)")
    imp = sub.add_parser("import-metainfo", help="store a folder metadata index JSON file")
    imp.add_argument("path")
    args = parser.parse_args(argv)

    if args.command == "import-metainfo":
        try:
            import_metainfo(args.path)
        except (OSError, ValueError) as e:
            logger.error(f"Metadata import failed: {e}")
            raise SystemExit(1)
        return

    from app.main import app

    run_server(app)


if __name__ == "__main__":
    main()
