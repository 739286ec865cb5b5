from flask import Blueprint, jsonify

from extensions import get_store
from practice.auth.security import token_required
from practice.reports.services import ReportService

dashboard_bp = Blueprint("dashboard", __name__, url_prefix="/api")


@dashboard_bp.route("/stats")
@token_required
def stats():
    return jsonify(get_store().get_stats())


@dashboard_bp.route("/reports")
@token_required
def reports():
    store = get_store()
    report = ReportService.build(store.list_clients(), store.list_tasks(), store.clock())
    return jsonify(report)
