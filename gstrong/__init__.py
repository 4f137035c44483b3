# gstrong/__init__.py
import logging

from flask import Flask, jsonify
from flask_cors import CORS
from flask_sqlalchemy import SQLAlchemy
from flask_jwt_extended import JWTManager

from config import Config

db = SQLAlchemy()
jwt = JWTManager()


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    # Init extensions
    db.init_app(app)
    jwt.init_app(app)

    origins = app.config.get("CORS_ORIGINS", "*")
    if origins != "*":
        origins = [o.strip() for o in origins.split(",") if o.strip()]
    CORS(app, resources={r"/api/*": {"origins": origins}})

    # -----------------------------
    # JWT error handlers
    # -----------------------------
    @jwt.unauthorized_loader
    def unauthorized_callback(reason):
        return (
            jsonify(
                {
                    "message": "Missing or invalid auth token",
                    "error": reason,
                }
            ),
            401,
        )

    @jwt.invalid_token_loader
    def invalid_token_callback(reason):
        return (
            jsonify(
                {
                    "message": "Invalid auth token",
                    "error": reason,
                }
            ),
            422,
        )

    @jwt.expired_token_loader
    def expired_token_callback(jwt_header, jwt_payload):
        return jsonify({"message": "Token has expired"}), 401

    # -----------------------------
    # IMPORT BLUEPRINTS (all routes)
    # -----------------------------
    from .routes.auth_routes import auth_bp
    from .routes.profile_routes import profile_bp
    from .routes.stats_routes import stats_bp
    from .routes.bingo_routes import bingo_bp
    from .routes.workout_routes import workouts_bp
    from .routes.rewards_routes import rewards_bp
    from .routes.exercise_routes import exercises_bp
    from .routes.notification_routes import notifications_bp

    # -----------------------------
    # REGISTER BLUEPRINTS
    # -----------------------------
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(profile_bp, url_prefix="/api/profile")
    app.register_blueprint(stats_bp, url_prefix="/api/stats")
    app.register_blueprint(bingo_bp, url_prefix="/api/bingo")
    app.register_blueprint(workouts_bp, url_prefix="/api/workouts")
    app.register_blueprint(rewards_bp, url_prefix="/api/rewards")
    app.register_blueprint(exercises_bp, url_prefix="/api/exercises")
    app.register_blueprint(notifications_bp, url_prefix="/api/notifications")

    @app.route("/api/health")
    def health():
        return {"status": "ok"}

    # -----------------------------
    # DB init
    # -----------------------------
    with app.app_context():
        from .models import user, user_stats, workout, bingo, achievement, notification  # noqa: F401
        db.create_all()

    return app
