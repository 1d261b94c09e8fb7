#!/usr/bin/env python3
"""
Production startup script with configuration validation.
Fails fast if any critical configuration is missing or invalid.
"""
import sys
import logging
import asyncio

from pydantic import ValidationError


def setup_logging():
    """Setup basic logging for startup validation."""
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)]
    )
    return logging.getLogger(__name__)


def validate_configuration() -> bool:
    """Configuration validation before startup."""
    logger = setup_logging()

    logger.info("Starting AEO Snippet Compare configuration validation...")

    try:
        from aeo_compare.config import get_settings
        settings = get_settings()
    except ValidationError as e:
        logger.error(f"Configuration validation failed: {e}")
        logger.error("Please check your environment variables and .env file")
        return False

    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Debug mode: {settings.debug}")
    logger.info(f"Model: {settings.openrouter_model}")

    if not settings.has_api_key:
        logger.error("OPENROUTER_API_KEY is not set")
        return False

    logger.info("Configuration validation completed successfully")
    return True


def print_startup_banner():
    """Print application startup banner."""
    from aeo_compare import __version__
    from aeo_compare.config import get_settings
    settings = get_settings()

    banner = f"""
+--------------------------------------------------------------+
|                   AEO Snippet Compare                        |
|                                                              |
|  Environment: {settings.environment:>46} |
|  Version:     {__version__:>46} |
|  Debug:       {str(settings.debug):>46} |
+--------------------------------------------------------------+

Starting server on {settings.host}:{settings.port}
"""
    print(banner)


async def main():
    """Main startup function."""
    if not validate_configuration():
        print("\nConfiguration validation failed. Server startup aborted.")
        print("\nPlease check:")
        print("1. OPENROUTER_API_KEY is set")
        print("2. Settings values are in range (temperature, max tokens, timeout)")
        print("3. DEBUG is false when ENVIRONMENT=production")
        sys.exit(1)

    print_startup_banner()

    import uvicorn
    from aeo_compare.main import app
    from aeo_compare.config import get_settings
    settings = get_settings()

    config = uvicorn.Config(
        app=app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        access_log=not settings.environment == "production",
    )
    server = uvicorn.Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\nShutdown requested by user")
        sys.exit(0)
