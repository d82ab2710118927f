"""Serverless entry point: exposes the WSGI ``app`` built with the production settings."""
import os
import sys

# The deployment runs this file directly, so the project root is not importable yet
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config_prod import ProductionConfig  # noqa: E402
from taskboard import create_app  # noqa: E402

app = create_app(ProductionConfig)

if __name__ == '__main__':
    app.run(debug=False, port=int(os.environ.get('PORT', 5001)))
