"""Health check endpoint."""

from http.server import BaseHTTPRequestHandler
import json
import os

from src.utils.wizard_config import WizardConfig
from src.wizard.steps import TOTAL_STEPS


def health_payload() -> dict:
    """Service status, including whether the record store is configured."""
    configured = bool(os.environ.get("SUPABASE_URL") and os.environ.get("SUPABASE_SERVICE_ROLE_KEY"))
    return {
        "status": "ok" if configured else "degraded",
        "service": "listing-wizard",
        "record_store": {
            "configured": configured,
            "table": WizardConfig.PROPERTIES_TABLE,
        },
        "wizard_steps": TOTAL_STEPS,
    }


class handler(BaseHTTPRequestHandler):
    """Health check handler for Vercel serverless function."""

    def do_GET(self):
        """Handle GET request."""
        payload = health_payload()
        self.send_response(200 if payload["status"] == "ok" else 503)
        self.send_header('Content-Type', 'application/json')
        self.end_headers()
        self.wfile.write(json.dumps(payload).encode('utf-8'))

    def do_POST(self):
        """Handle POST request (same as GET for health check)."""
        self.do_GET()
