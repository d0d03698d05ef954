"""Azure Functions V2 entry point: registers blueprints from src/."""

import os
import sys

# Add src/ to Python path so that Azure Functions runtime can resolve
# the infinicloud_proxy package from the src/ layout.
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "src"))

import azure.functions as func

from infinicloud_proxy.functions.gateway_trigger import bp as gateway_bp
from infinicloud_proxy.functions.http_trigger import bp as http_bp

app = func.FunctionApp()
app.register_blueprint(http_bp)
app.register_blueprint(gateway_bp)
