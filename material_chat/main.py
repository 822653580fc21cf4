"""Main application entry point.

Runs FastAPI with NiceGUI mounted for the chat interface.
Environment variables are loaded from .env file.
"""

import logging
import os
import sys

from dotenv import load_dotenv

# Load environment variables before any other imports that might need them
load_dotenv()

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


def main() -> None:
    """Run FastAPI with NiceGUI mounted on the same server.

    The inference configuration is validated before the server starts,
    so a missing credential fails here rather than on the first page load.
    """
    import uvicorn
    from nicegui import ui

    from material_chat.api.app import create_app
    from material_chat.inference.config import get_inference_config
    from material_chat.ui.chat_page import chat_page  # noqa: F401 - Registers the page

    config = get_inference_config()
    logger.info(f"Using {config.backend} backend at {config.endpoint}")

    app = create_app()

    # Mount NiceGUI onto FastAPI
    ui.run_with(
        app,
        title="materiAl",
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "material-chat-secret"),
    )

    port = int(os.getenv("PORT", "8000"))
    logger.info(f"Chat UI available at http://localhost:{port}/")

    uvicorn.run(
        app,
        host=os.getenv("HOST", "0.0.0.0"),
        port=port,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


if __name__ == "__main__":
    main()
