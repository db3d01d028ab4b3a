#!/usr/bin/env python3
"""
Speech Bubbles - Main Application Entry Point
Plays a scripted multi-character conversation through the speech bubble engine.

Features:
- Replies split into bubble-sized segments at sentence boundaries
- Up to two bubbles per character with slide and fade transitions
- Reading pauses sized to each bubble's word count
- Characters speak concurrently and independently

Version: 1.0.0
Python: 3.11+
"""

import asyncio
import logging
import sys

from speech_bubbles.core.application import BubbleApplication
from speech_bubbles.core.config import load_config
from speech_bubbles.utils.logger import setup_logging


def check_python_version():
    """Ensure compatible Python version."""
    if sys.version_info < (3, 11):
        print("❌ Python 3.11 or higher is required!")
        print(f"Current version: {sys.version}")
        sys.exit(1)


def main():
    """Main application entry point."""
    print("💬 Speech Bubbles - Starting Conversation...")
    print("=" * 50)

    check_python_version()

    try:
        config = load_config()
    except Exception as e:
        print(f"❌ Invalid configuration: {e}")
        sys.exit(1)

    setup_logging(config)
    logger = logging.getLogger(__name__)
    logger.info(f"Configuration loaded: {config.app_name}")

    try:
        app = BubbleApplication(config)
        asyncio.run(app.run())

    except KeyboardInterrupt:
        logger.info("Application interrupted by user")
        print("\n👋 Goodbye!")
    except Exception as e:
        logger.error(f"Application error: {e}", exc_info=True)
        print(f"❌ Application error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
