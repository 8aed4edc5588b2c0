#!/usr/bin/env python
"""Application entry point."""
import os

from rise import create_app
from rise.config import get_config

if __name__ == "__main__":
    config = get_config(os.getenv("ENV", "dev"))
    app = create_app(config)

    app.run(host="0.0.0.0", port=int(os.getenv("PORT", 3002)), debug=config.DEBUG)
