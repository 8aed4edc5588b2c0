#!/usr/bin/env python
"""Production entry point for the RISE Research backend."""
import logging
import os
import sys

from rise import create_app
from rise.config import get_config

# Set up basic logging first
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def main():
    """Main application entry point with error handling."""
    try:
        logger.info("🚀 Starting RISE Research backend...")

        port = int(os.getenv("PORT", 3002))
        logger.info(f"🔌 Port from environment: {port}")
        logger.info(f"📍 Environment: {os.getenv('ENV', 'prod')}")
        logger.info(
            f"🗂️ Airtable token: {'SET' if os.getenv('AIRTABLE_PERSONAL_ACCESS_TOKEN') else 'NOT SET'}"
        )

        env = os.getenv("ENV", "prod")
        config = get_config(env)
        for key, value in config.get_store_info().items():
            logger.info(f"📋 {key}: {value}")

        logger.info("🏗️ Creating Flask application...")
        application = create_app(config)
        logger.info(f"🌍 Starting server on 0.0.0.0:{port}")

        if env == "prod" and os.getenv("USE_GUNICORN", "false").lower() == "true":
            # gunicorn serves `app:app`
            logger.info("Running in production mode with gunicorn")
        else:
            application.run(host="0.0.0.0", port=port, debug=False, use_reloader=False)

    except ImportError as e:
        logger.error(f"❌ Import Error: {str(e)}")
        logger.error("Make sure all dependencies are installed")
        sys.exit(1)

    except Exception as e:
        logger.error(f"❌ Startup Error: {str(e)}")
        logger.error("Full error details:", exc_info=True)
        sys.exit(1)


# Create the app instance for Gunicorn
app = create_app(get_config(os.getenv("ENV", "prod")))

if __name__ == "__main__":
    main()
