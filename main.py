import logging
import sys

import uvicorn

from tokfetch.config.settings_manager import load_settings
from tokfetch.server import build_app


def setup_logging(settings):
    """Logs to the configured file and to the console."""
    general = settings['general']
    logging.basicConfig(
        level=getattr(logging, str(general.get('log_level', 'INFO')).upper(), logging.INFO),
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(general.get('log_file', 'debug_log.txt'), encoding='utf-8'),
            logging.StreamHandler(sys.stdout),
        ]
    )


def main():
    """
    The main function to run the API server.
    """
    settings = load_settings()
    setup_logging(settings)

    host = settings['server']['host']
    port = settings['server']['port']
    app = build_app(settings)

    logging.info("=======================================")
    logging.info("TikTok Downloader Server Started!")
    logging.info(f"Server: http://localhost:{port}")
    logging.info("Methods: yt-dlp + Playwright fallback")
    logging.info(f"Status: http://localhost:{port}/api/status")
    logging.info("=======================================")

    # uvicorn installs its own SIGINT/SIGTERM handlers and runs the app's shutdown hook
    uvicorn.run(app, host=host, port=port, log_config=None)


if __name__ == "__main__":
    main()
