"""Entry point for the guild server."""

from guildhall.config import settings
from guildhall.llm import OllamaClient
from guildhall.server import create_app
from guildhall.utils.logging import setup_logging


def main() -> None:
    """Main entry point."""
    logger = setup_logging(
        level=settings.log_level,
        log_file=settings.log_file,
        enable_color=settings.enable_color,
    )

    logger.info("Starting Guildhall on %s:%d", settings.host, settings.port)
    logger.debug("Configuration: %s", settings)

    if settings.oracle_enabled:
        client = OllamaClient(settings.oracle_model, settings.ollama_host, settings.oracle_timeout)
        if not client.health_check():
            logger.warning("Model %s is unavailable; heroes will decide with the fallback oracle", settings.oracle_model)

    app, socketio = create_app(settings)
    socketio.run(app, host=settings.host, port=settings.port, allow_unsafe_werkzeug=True)


if __name__ == "__main__":
    main()
