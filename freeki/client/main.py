"""FreeKi client - command-line entry point.

Starts a session, restores this device's settings, loads the server state
and applies the resulting theme.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import logging.handlers
import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from freeki.client.session import ClientSession
from freeki.shared.core.configuration import ConfigManager, ValidationLevel
from freeki.shared.core.events import PATH_ADMIN_SETTINGS, PATH_ERROR_MESSAGE, PATH_USER_THEME
from freeki.shared.core.service_registry import run_cleanup_handlers

PROJECT_ROOT = Path.cwd()
DATA_DIR = PROJECT_ROOT / "data"
LOGS_DIR = DATA_DIR / "logs"

logger = logging.getLogger(__name__)


def configure_logging(logs_dir: Path = LOGS_DIR) -> Path:
    """Configure the root logger.

    File handler: everything at LOG_LEVEL (default DEBUG) to data/logs/freeki.log
    Console handler: only WARNING and ERROR
    """
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_file_path = logs_dir / "freeki.log"

    log_level_str = os.getenv("LOG_LEVEL", "DEBUG").upper()
    log_level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    file_log_level = log_level_map.get(log_level_str, logging.DEBUG)

    root_logger = logging.getLogger()
    root_logger.setLevel(file_log_level)
    root_logger.handlers.clear()

    file_handler = logging.handlers.RotatingFileHandler(
        log_file_path,
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5,
        encoding='utf-8'
    )
    file_handler.setLevel(file_log_level)
    file_handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    ))
    root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S"
    ))
    root_logger.addHandler(console_handler)

    # Suppress verbose third-party library logs
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    logger.info(f"Logging configured: file={log_file_path}, console=WARNING+")
    return log_file_path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="freeki-client", description="FreeKi client state engine")
    parser.add_argument("--config-dir", type=Path, default=None, help="Directory holding defaults/user/project YAML")
    parser.add_argument("--env-file", type=Path, default=None, help="Extra .env file to load")
    parser.add_argument("--fake-api", action="store_true", help="Use the in-memory demo API")
    parser.add_argument("--theme", choices=["light", "dark", "auto"], help="Save a theme preference for this device")
    parser.add_argument("--lenient", action="store_true", help="Fall back to defaults on invalid configuration")
    return parser


async def run(args: argparse.Namespace) -> int:
    manager = ConfigManager(config_dir=args.config_dir, env_file=args.env_file)
    level = ValidationLevel.LENIENT if args.lenient else ValidationLevel.STRICT
    config = manager.get_config(level)
    if args.fake_api:
        config = config.model_copy(update={"api": config.api.model_copy(update={"use_fake_api": True})})

    session = ClientSession(config)
    store = session.start()
    try:
        if args.theme:
            store.set(PATH_USER_THEME, args.theme)
        await session.load_server_state()
        # Let the debounced theme apply land before reporting
        await asyncio.sleep(config.theme.debounce_ms / 1000.0)

        admin = store.get(PATH_ADMIN_SETTINGS)
        print(f"{admin['wikiTitle']} ({admin['companyName']})")
        print(f"Theme: {session.theme_applier.resolve_mode()} | settings slot: {session.device.settings_key}")
        error = store.get(PATH_ERROR_MESSAGE)
        if error:
            print(f"Error: {error}")
            return 1
        return 0
    finally:
        await session.aclose()


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    configure_logging()
    args = build_parser().parse_args(argv)
    try:
        return asyncio.run(run(args))
    except ValueError as e:
        logger.error(f"Startup failed: {e}")
        print(f"Startup failed: {e}")
        return 2
    finally:
        run_cleanup_handlers()


if __name__ == "__main__":
    raise SystemExit(main())
