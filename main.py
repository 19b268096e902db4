"""
Docket Agent - Entry Point
Voice-note driven case resolution and workflow orchestration for law practices
"""

import logging
import uvicorn

from docket_agent.config import settings
from docket_agent.api import create_app

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Create FastAPI application
app = create_app()

if __name__ == "__main__":
    logger.info(f"Starting Docket Agent on port {settings.PORT}")
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT, log_level="info")
