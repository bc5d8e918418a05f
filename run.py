#!/usr/bin/env python3
"""
Development server runner
"""

import os

import uvicorn

if __name__ == "__main__":
    port = int(os.environ.get("PORT", 3000))
    host = os.environ.get("HOST", "0.0.0.0")

    uvicorn.run(
        "gamers_challenge.main:app",
        host=host,
        port=port,
        reload=True if os.environ.get("ENVIRONMENT") == "development" else False,
        log_level="info",
        access_log=True,
    )
