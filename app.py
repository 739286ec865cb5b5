import logging
import os
import secrets
from typing import Any, Dict, Optional

from flask import Flask, jsonify

from extensions import init_store
from practice.crypto import CredentialCipher, generate_key
from practice.errors import register_error_handlers
from practice.store import PracticeStore


# ---------------- Configuration ----------------

def _configure(app: Flask, overrides: Optional[Dict[str, Any]]) -> None:
    app.config["SECRET_KEY"] = os.environ.get("JWT_SECRET")
    app.config["ENCRYPTION_KEY"] = os.environ.get("ENCRYPTION_KEY")
    app.config["TOKEN_TTL_DAYS"] = int(os.environ.get("TOKEN_TTL_DAYS", "7"))
    app.config["UPLOAD_FOLDER"] = os.environ.get("UPLOAD_FOLDER") or os.path.join(app.root_path, "uploads")
    app.config["ADMIN_USERNAME"] = os.environ.get("ADMIN_USERNAME", "admin")
    app.config["ADMIN_PASSWORD"] = os.environ.get("ADMIN_PASSWORD", "admin123")
    app.config["ADMIN_NAME"] = os.environ.get("ADMIN_NAME", "Tax Consultant Admin")
    app.config["LOG_LEVEL"] = os.environ.get("LOG_LEVEL", "INFO")

    if overrides:
        app.config.update(overrides)

    app.logger.setLevel(app.config["LOG_LEVEL"])

    # unset secrets get a random per-process value; nothing is persisted across restarts
    if not app.config.get("SECRET_KEY"):
        app.config["SECRET_KEY"] = secrets.token_urlsafe(48)
        app.logger.warning("JWT_SECRET is not set; using a random secret for this process")
    if not app.config.get("ENCRYPTION_KEY"):
        app.config["ENCRYPTION_KEY"] = generate_key()
        app.logger.warning("ENCRYPTION_KEY is not set; using a random key for this process")

    os.makedirs(app.config["UPLOAD_FOLDER"], exist_ok=True)


def create_app(overrides: Optional[Dict[str, Any]] = None, store: Optional[PracticeStore] = None) -> Flask:
    app = Flask(__name__)
    _configure(app, overrides)

    if store is None:
        store = PracticeStore(CredentialCipher(app.config["ENCRYPTION_KEY"]))
    init_store(app, store)
    store.seed_admin(
        app.config["ADMIN_USERNAME"],
        app.config["ADMIN_PASSWORD"],
        app.config["ADMIN_NAME"],
    )

    register_error_handlers(app)

    # ---------------- Register Blueprints ----------------
    from practice.auth.routes import auth_bp
    app.register_blueprint(auth_bp)

    from practice.clients.routes import clients_bp
    app.register_blueprint(clients_bp)

    from practice.tasks.routes import tasks_bp
    app.register_blueprint(tasks_bp)

    from practice.documents.routes import documents_bp
    app.register_blueprint(documents_bp)

    from practice.dashboard.routes import dashboard_bp
    app.register_blueprint(dashboard_bp)

    @app.route("/api/health")
    def health():
        return jsonify({"status": "ok"})

    return app


if __name__ == "__main__":
    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))
    create_app().run(debug=True)
