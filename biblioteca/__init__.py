from dotenv import load_dotenv
from flask import Flask
from flasgger import Swagger
from sqlalchemy import event

from .errors import register_error_handlers, error_payload
from .config import Config
from .extensions import db, migrate, jwt, ma
from .swagger_config import swagger_template
from .middleware.request_id import init_request_id
from .services.lifecycle import PollLifecycleManager

load_dotenv()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE CASCADE unless asked per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_app(config_class=Config) -> Flask:
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))
    Swagger(app, template=swagger_template(app))

    # Extensions
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    ma.init_app(app)

    with app.app_context():
        from . import models  # noqa: F401
        if db.engine.dialect.name == "sqlite":
            event.listen(db.engine, "connect", _enable_sqlite_foreign_keys)

    # Poll services: one manager per app, sessions scoped per request by Flask-SQLAlchemy
    app.extensions["poll_manager"] = PollLifecycleManager(
        session_factory=lambda: db.session,
        logger=app.logger,
        tx_timeout_ms=app.config.get("POLL_TX_TIMEOUT_MS"),
    )

    # Middleware + errors
    init_request_id(app)
    register_error_handlers(app)

    # Blueprint imports
    from .api.auth.routes import auth_bp
    from .api.poll.routes import polls_bp
    from .api.voting.routes import voting_bp
    from .api.results.routes import results_bp

    # Blueprints
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(polls_bp, url_prefix="/api/polls")
    app.register_blueprint(voting_bp, url_prefix="/api/polls")
    app.register_blueprint(results_bp, url_prefix="/api/polls")

    from .cli import register_cli
    register_cli(app)

    # Health check
    @app.get("/health")
    def health():
        return {"status": "ok"}, 200

    # JWT failures use the same error envelope as everything else
    @jwt.unauthorized_loader
    def missing_token(reason):
        return error_payload("UNAUTHORIZED", "Authorization token is required", {"reason": reason}, status=401)

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return error_payload("INVALID_TOKEN", "The provided token is not valid", {"reason": reason}, status=401)

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return error_payload("TOKEN_EXPIRED", "The provided token has expired", status=401)

    return app
