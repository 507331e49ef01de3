import logging
from datetime import datetime, timezone
from typing import Optional

from flask import Flask, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from hardware_store.core.config import Config
from hardware_store.core.dependencies import build_container
from hardware_store.core.exceptions import BaseAPIException, DatabaseError, InternalServerError
from hardware_store.db import create_db_engine, get_connection, init_db
from hardware_store.routes import (
    account_bp, admin_bp, cart_bp, categories_bp, orders_bp, products_bp
)

logger = logging.getLogger(__name__)


def create_app(config: Optional[Config] = None) -> Flask:
    """
    Application factory.

    Each call builds its own engine and dependency container, so tests can
    create isolated apps against their own database.
    """
    config = config or Config()
    config.validate()

    logging.basicConfig(
        level=getattr(logging, config.app.log_level.upper(), logging.INFO),
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )

    app = Flask(__name__)
    app.config["DEBUG"] = config.app.debug

    engine = create_db_engine(config.database)
    init_db(engine)
    app.extensions["container"] = build_container(config, engine)

    # ------------------------------------------------------------------ #
    # Blueprints, each domain under /api/v1/                              #
    # ------------------------------------------------------------------ #
    prefix = f"/api/{config.api.version}"
    app.register_blueprint(products_bp,   url_prefix=f"{prefix}/products")
    app.register_blueprint(categories_bp, url_prefix=f"{prefix}/categories")
    app.register_blueprint(cart_bp,       url_prefix=f"{prefix}/cart")
    app.register_blueprint(orders_bp,     url_prefix=f"{prefix}/orders")
    app.register_blueprint(account_bp,    url_prefix=f"{prefix}/account")
    app.register_blueprint(admin_bp,      url_prefix=f"{prefix}/admin")

    # ------------------------------------------------------------------ #
    # Error handlers: one JSON error envelope                             #
    # ------------------------------------------------------------------ #
    @app.errorhandler(BaseAPIException)
    def api_error(e: BaseAPIException):
        if e.status_code >= 500:
            logger.error(f"{e.error_code}: {e.internal_message}")
        else:
            logger.info(f"{e.error_code}: {e.message}")
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(HTTPException)
    def http_error(e: HTTPException):
        code = (e.name or "error").upper().replace(" ", "_")
        return jsonify({
            "success": False,
            "error": {"code": code, "message": str(e.description), "details": {}},
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }), e.code

    @app.errorhandler(SQLAlchemyError)
    def db_error(e):
        logger.exception("Unhandled database error")
        return jsonify(DatabaseError(str(e)).to_dict()), 500

    @app.errorhandler(Exception)
    def unexpected_error(e):
        logger.exception("Unhandled error")
        return jsonify(InternalServerError(str(e)).to_dict()), 500

    # ------------------------------------------------------------------ #
    # Health check                                                         #
    # ------------------------------------------------------------------ #
    @app.get("/health")
    def health():
        """Liveness + readiness probe. Returns 503 if DB is unreachable."""
        try:
            with get_connection(engine) as conn:
                conn.execute(text("SELECT 1"))
            return jsonify({
                "status": "ok",
                "database": "reachable",
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }), 200
        except SQLAlchemyError as exc:
            logger.warning(f"Health check failed: {exc}")
            return jsonify({"status": "error", "database": "unreachable"}), 503

    return app


if __name__ == "__main__":
    cfg = Config()
    application = create_app(cfg)
    application.run(debug=cfg.app.debug, host=cfg.app.host, port=cfg.app.port)
