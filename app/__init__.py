from flask import Flask

def create_app(scorer_factory=None):
    """
    scorer_factory(missing) -> GroupSentimentScorer, used when a request
    carries no inline lexicon. Defaults to GroupSentimentScorer.from_config.
    """
    app = Flask(__name__)

    if scorer_factory is not None:
        app.config["SCORER_FACTORY"] = scorer_factory

    # Blueprints
    from .views.api import api_bp
    app.register_blueprint(api_bp, url_prefix="/api")

    return app
