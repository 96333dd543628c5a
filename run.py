#!/usr/bin/env python3
"""
Bank Simulator Entry Point

Starts the FastAPI server for the bank simulator.
"""

import sys

import uvicorn

from banksim.config import get_config
from banksim.logging_config import setup_logging_from_config


if __name__ == "__main__":
    config = get_config()
    logger = setup_logging_from_config(config)

    logger.info(f"Starting bank simulator '{config.bank_name}' on {config.api_host}:{config.api_port}")
    try:
        uvicorn.run(
            "banksim.api:app",
            host=config.api_host,
            port=config.api_port,
            reload=False
        )
    except KeyboardInterrupt:
        logger.info("Shutting down bank simulator")
    except Exception as e:
        logger.error(f"Error starting server: {e}")
        sys.exit(1)
