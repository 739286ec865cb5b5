from flask import Blueprint, jsonify, request

from extensions import get_store
from practice.auth.security import token_required
from practice.errors import ValidationError
from .forms import SERVICE_TYPES, TASK_STATUSES, validate_task_payload

tasks_bp = Blueprint("tasks", __name__, url_prefix="/api")


# ---------- Helpers ----------

def _filter_arg(name: str, allowed):
    value = (request.args.get(name) or "").strip()
    if not value:
        return None
    if value not in allowed:
        raise ValidationError({name: f"{name} must be one of {', '.join(allowed)}"})
    return value


# ---------- API ----------

@tasks_bp.route("/tasks")
@token_required
def list_tasks():
    status = _filter_arg("status", TASK_STATUSES)
    service_type = _filter_arg("serviceType", SERVICE_TYPES)
    tasks = get_store().list_tasks(status=status, service_type=service_type)
    return jsonify([t.to_dict() for t in tasks])


@tasks_bp.route("/tasks/client/<client_id>")
@token_required
def list_client_tasks(client_id: str):
    tasks = get_store().list_tasks_for_client(client_id)
    return jsonify([t.to_dict() for t in tasks])


@tasks_bp.route("/tasks/<task_id>")
@token_required
def get_task(task_id: str):
    return jsonify(get_store().get_task(task_id).to_dict())


@tasks_bp.route("/tasks", methods=["POST"])
@token_required
def create_task():
    data, errors = validate_task_payload(request.get_json(silent=True))
    if errors:
        raise ValidationError(errors, "Failed to create task")

    task = get_store().create_task(data)
    return jsonify(task.to_dict()), 201


@tasks_bp.route("/tasks/<task_id>", methods=["PUT"])
@token_required
def update_task(task_id: str):
    data, errors = validate_task_payload(request.get_json(silent=True), partial=True)
    if errors:
        raise ValidationError(errors, "Failed to update task")

    task = get_store().update_task(task_id, data)
    return jsonify(task.to_dict())


@tasks_bp.route("/tasks/<task_id>", methods=["DELETE"])
@token_required
def delete_task(task_id: str):
    get_store().delete_task(task_id)
    return "", 204
