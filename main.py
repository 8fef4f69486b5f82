"""
main.py — Single entry point.

Runs the Telegram bot (polling) in one asyncio event loop. The product
catalog is fetched once at startup so the first photo doesn't wait for it.
"""
import asyncio
import logging
import os
import signal
import sys
from pathlib import Path

import config
from bot import build_application

# Log file lives in DATA_DIR so a single Docker volume mount captures it.
_data_dir = Path(config.DATA_DIR)
_data_dir.mkdir(parents=True, exist_ok=True)

logging.basicConfig(
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    handlers=[
        logging.StreamHandler(sys.stdout),
        logging.FileHandler(str(_data_dir / "bot.log"), encoding="utf-8"),
    ],
)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


async def run() -> None:
    if not config.TELEGRAM_BOT_TOKEN:
        logger.critical("FATAL: TELEGRAM_BOT_TOKEN is not set.")
        raise SystemExit(1)
    if not config.GOOGLE_API_KEY:
        logger.warning("GOOGLE_API_KEY is not set — every analysis will fail until it is.")

    # ── Catalog warm-up ───────────────────────────────────────────────────────
    import catalog_store
    from errors import CatalogUnavailable
    if catalog_store.is_configured():
        try:
            products = await catalog_store.fetch_catalog()
            logger.info("Catalog ready: %d products", len(products))
        except CatalogUnavailable as exc:
            logger.error("Could not load product catalog: %s", exc)
    else:
        logger.warning("CATALOG_ENDPOINT not configured. Please add your MockAPI URL.")

    ptb_app = build_application()

    stop_event = asyncio.Event()

    def _stop(*_):
        logger.info("Shutdown signal received.")
        stop_event.set()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _stop)
        except (NotImplementedError, RuntimeError):
            # Windows doesn't support add_signal_handler for all signals
            pass

    async with ptb_app:
        await ptb_app.start()
        await ptb_app.updater.start_polling(
            allowed_updates=["message", "callback_query"],
            drop_pending_updates=True,
        )
        logger.info("✅ Bot is running. Press Ctrl+C to stop.")

        await stop_event.wait()

        logger.info("Shutting down…")
        await ptb_app.updater.stop()
        await ptb_app.stop()

    logger.info("Goodbye.")


def main() -> None:
    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
