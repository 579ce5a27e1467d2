# wsgi_app.py
import logging
import asyncio
import threading
from flask import Flask, jsonify, request

from config import LOG_LEVEL
from services.db_service import init_db
from utils.alert_checker import evaluate_alerts

# ------------------ Logging ------------------
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=LOG_LEVEL
)
logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

# ------------------ Evaluation loop (dedicated thread) ------------------
_loop = None
_loop_lock = threading.Lock()


def _run_loop_forever(loop: asyncio.AbstractEventLoop):
    asyncio.set_event_loop(loop)
    logger.info("Evaluation loop started and running forever")
    loop.run_forever()


def _get_loop() -> asyncio.AbstractEventLoop:
    """Start the background event loop on first use."""
    global _loop
    with _loop_lock:
        if _loop is None:
            _loop = asyncio.new_event_loop()
            threading.Thread(target=_run_loop_forever, args=(_loop,), daemon=True).start()
    return _loop


def run_evaluation() -> dict:
    """
    Run one evaluation pass on the background loop and wait for its summary.

    No overall deadline: each price request is bounded by PRICE_FETCH_TIMEOUT
    and the summary is returned only once the pass has finished.
    """
    future = asyncio.run_coroutine_threadsafe(evaluate_alerts(), _get_loop())
    return future.result()


# ------------------ Flask App ------------------
def create_app() -> Flask:
    app = Flask(__name__)

    @app.after_request
    def _add_cors_headers(response):
        response.headers.update(CORS_HEADERS)
        return response

    @app.get("/health")
    def health():
        return "ok"

    @app.route("/price-alert-monitor", methods=["GET", "POST", "OPTIONS"])
    def price_alert_monitor():
        if request.method == "OPTIONS":
            return "", 200

        try:
            summary = run_evaluation()
        except Exception as e:
            logger.exception("Error in price-alert-monitor")
            return jsonify({"success": False, "error": str(e) or e.__class__.__name__}), 500

        if summary["checked"] == 0:
            message = "No active alerts to check"
        else:
            message = f"Checked {summary['checked']} alerts, triggered {summary['triggered']}"

        return jsonify({
            "success": True,
            "message": message,
            "triggeredAlerts": summary["triggered"],
        })

    return app


# ------------------ WSGI Entry Point ------------------
app = create_app()

# ------------------ Local Testing ------------------
if __name__ == "__main__":
    init_db()
    app.run(host="0.0.0.0", port=5000)
