"""
Check Status Azure Function
HTTP-Triggered function exposing the same contract as GET /check-status.
"""
import azure.functions as func
import json
import logging

from app.imagegen import build_status_report

logger = logging.getLogger(__name__)


def main(req: func.HttpRequest) -> func.HttpResponse:
    """
    HTTP Trigger handler for the status check. Always answers 200.
    """
    logger.info("Check status function triggered.")
    return func.HttpResponse(
        json.dumps(build_status_report()),
        status_code=200,
        mimetype="application/json",
        headers={"Access-Control-Allow-Origin": "*"}
    )
