from __future__ import annotations

from todolist.config import load_settings
from todolist.logging import configure_logging, get_logger


def main() -> int:
    """
    Programmatic entrypoint.

    Recommended dev command:
      uvicorn todolist.api.app:app --reload

    This entrypoint exists so you can also do:
      python -m todolist.main
    """
    settings = load_settings()
    configure_logging(settings.log_level)
    log = get_logger(__name__)

    settings.db_path.parent.mkdir(parents=True, exist_ok=True)
    log.info("Starting todolist API with DB path: %s", settings.db_path)

    # Import here so config/logging are set before app import side-effects.
    try:
        from todolist.api.app import app  # noqa: F401
    except Exception:
        log.exception("Failed to import FastAPI app (todolist.api.app:app).")
        return 1

    import uvicorn

    uvicorn.run(
        "todolist.api.app:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level,
        reload=False,  # prefer `uvicorn ... --reload` in dev
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
