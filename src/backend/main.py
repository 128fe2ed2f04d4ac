"""Democrat API main entry point."""

import logging

import uvicorn
from dotenv import load_dotenv

load_dotenv()

from backend.api.app import create_app
from democrat.core.utils import set_logging_level
from democrat.settings import ENVIRONMENT

set_logging_level(logging.INFO, service_name="api", environment=ENVIRONMENT)

# Create the application
app = create_app()

if __name__ == "__main__":
    uvicorn.run("backend.main:app", host="0.0.0.0", port=8000, reload=True)
