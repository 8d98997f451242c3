#!/usr/bin/env python3
"""Development server runner for TinyMonth."""

import uvicorn

from tinymonth.config import AppConfig

if __name__ == "__main__":
    config = AppConfig.from_env()
    uvicorn.run(
        "tinymonth.api:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level=config.log_level.lower()
    )
