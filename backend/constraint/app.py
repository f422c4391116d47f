"""
Main application module for the Constraint puzzle API.

This module sets up the Flask application, registers the daily Blueprint,
and defines the root route and error handlers.

Routes:
- /: Welcome message for the Constraint puzzle API.
- /daily/...: Generated puzzle artifacts (see blueprints/daily/routes.py).

Error Handlers:
- 404 Not Found: Handles requests for non-existent routes.
- 500 Internal Server Error: Handles internal server errors.
"""

from flask import Flask

from .blueprints.daily.routes import daily_bp
from .config import daily_dir_from_env
from .services.utils import create_response


def create_app(daily_dir=None):
    app = Flask(__name__)
    app.config["CONSTRAINT_DAILY_DIR"] = daily_dir or daily_dir_from_env()
    app.register_blueprint(daily_bp, url_prefix="/daily")

    @app.route("/")
    def index():
        return create_response(data={"message": "Welcome to the Constraint puzzle API!"})

    @app.errorhandler(404)
    def not_found(error):
        return create_response(error="Not Found", status_code=404)

    @app.errorhandler(500)
    def internal_server_error(error):
        return create_response(error="Internal Server Error", status_code=500)

    return app


if __name__ == "__main__":
    from dotenv import load_dotenv

    load_dotenv()
    app = create_app()
    app.run(debug=True)
