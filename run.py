#!/usr/bin/env python3
"""
Run script for the ReelChat AI functions service
"""
import uvicorn

from reelchat.config.settings import settings
from reelchat.main import app

if __name__ == "__main__":
    uvicorn.run(app, host=settings.host, port=settings.port, reload=settings.debug)
