"""
Main server entry point: API plus the built frontend
"""
import logging

import uvicorn

from govdoc_backend.api import create_app
from govdoc_backend.config import load_settings


def main():
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger = logging.getLogger("govdoc_backend")

    app = create_app(settings=settings)

    logger.info("=" * 60)
    logger.info("GOVDOC ANALYZER")
    logger.info(f"   - API: http://localhost:{settings.port}/api")
    logger.info(f"   - API Docs: http://localhost:{settings.port}/docs")
    logger.info(f"   - Text extraction enabled: HWP ({settings.hwp5txt_command}), DOCX (python-docx)")
    logger.info("=" * 60)

    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
