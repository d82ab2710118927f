from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from flask_wtf.csrf import CSRFProtect, CSRFError
from werkzeug.exceptions import HTTPException
from config import Config

from taskboard.errors import TaskboardError
from taskboard.logging_config import setup_logging

db = SQLAlchemy()
login_manager = LoginManager()
csrf = CSRFProtect()


def create_app(config_class=Config):
    # Serverless deployments only allow writes under /tmp
    app = Flask(__name__, instance_relative_config=False, instance_path='/tmp')
    app.config.from_object(config_class)

    setup_logging(app.config.get('LOG_LEVEL', 'INFO'), app.config.get('LOG_FILE'))

    db.init_app(app)
    login_manager.init_app(app)
    csrf.init_app(app)

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({'message': 'Authentication required.'}), 401

    from taskboard.blueprints.auth import auth_bp
    from taskboard.blueprints.api import api_bp
    from taskboard.blueprints.preferences import preferences_bp

    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(api_bp, url_prefix='/api')
    app.register_blueprint(preferences_bp, url_prefix='/api')

    # Error handlers
    @app.errorhandler(TaskboardError)
    def taskboard_error(error):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(CSRFError)
    def csrf_error(error):
        return jsonify({'message': error.description}), 400

    @app.errorhandler(404)
    def not_found_error(error):
        return jsonify({'message': 'Resource not found.'}), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({'message': 'Method not allowed.'}), 405

    @app.errorhandler(500)
    def internal_error(error):
        db.session.rollback()
        app.logger.error('Unhandled server error: %s', getattr(error, 'original_exception', error))
        return jsonify({'message': 'Internal server error.'}), 500

    @app.errorhandler(HTTPException)
    def http_error(error):
        return jsonify({'message': error.description}), error.code

    # Import models to ensure they are registered with SQLAlchemy
    from taskboard.models import User, Board, Column, Card

    with app.app_context():
        db.create_all()

    return app
