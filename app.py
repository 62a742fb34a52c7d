"""CSP Demo - Flask application serving pages under a Content-Security-Policy."""
import logging

from flask import Blueprint, Flask, render_template
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from config import get_config
from csp import apply_policy

pages = Blueprint("pages", __name__)


# ==================== ROUTES ====================

@pages.route("/")
def index():
    """Render the home page."""
    return render_template("index.html")


@pages.route("/checkout")
def checkout():
    """Checkout page: many scripts, one of them from a host the policy does not allow."""
    return render_template("checkout.html")


@pages.route("/profile")
def profile():
    """Profile page: first-party and allowed third-party scripts only."""
    return render_template("profile.html")


@pages.route("/healthz")
def healthz():
    """Simple health check."""
    return "ok", 200, {"Content-Type": "text/plain; charset=utf-8"}


# ==================== APP FACTORY ====================

def create_app(config=None):
    """Build the Flask app around an already validated configuration."""
    config = config or get_config()

    app = Flask(__name__, static_folder="public", static_url_path="/public")
    app.config["DEBUG"] = config.DEBUG
    app.config["CSP_POLICY"] = config.CSP_POLICY

    # Initialize rate limiter; the health check stays reachable for probes
    limiter = Limiter(
        key_func=get_remote_address,
        app=app,
        default_limits=[config.RATELIMIT_DEFAULT],
        storage_uri=config.RATELIMIT_STORAGE_URI,
        headers_enabled=True,  # Add rate limit headers to responses
        swallow_errors=False,
    )
    limiter.exempt(healthz)

    app.register_blueprint(pages)

    # Start-up lines must show outside debug mode too
    app.logger.setLevel(logging.INFO)

    policy = config.CSP_POLICY

    @app.after_request
    def add_csp_header(response):
        """Attach the policy header to every response, static files and errors included."""
        return apply_policy(policy, response)

    @app.errorhandler(404)
    def not_found(error):
        """Handle unknown routes."""
        return render_template("not_found.html"), 404

    @app.errorhandler(429)
    def rate_limit_exceeded(error):
        """Handle rate limit exceeded error."""
        return "Too many requests. Please slow down.", 429, {"Content-Type": "text/plain; charset=utf-8"}

    if policy.enabled:
        app.logger.info(f"CSP {policy.mode} via {policy.header_name}: {policy.header_value}")
    else:
        app.logger.info("CSP disabled: no policy header will be sent")

    return app


config = get_config()
app = create_app(config)


if __name__ == "__main__":
    app.logger.info(f"Demo listening on http://localhost:{config.PORT}")
    app.run(debug=config.DEBUG, host=config.HOST, port=config.PORT)
