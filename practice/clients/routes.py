from flask import Blueprint, current_app, jsonify, request

from extensions import get_store
from practice.auth.security import token_required
from practice.errors import ValidationError
from .forms import validate_client_payload

clients_bp = Blueprint("clients", __name__, url_prefix="/api")


@clients_bp.route("/clients")
@token_required
def list_clients():
    q = (request.args.get("q") or "").strip()
    clients = get_store().list_clients(q or None)
    return jsonify([c.to_dict() for c in clients])


@clients_bp.route("/clients/<client_id>")
@token_required
def get_client(client_id: str):
    return jsonify(get_store().get_client(client_id).to_dict())


@clients_bp.route("/clients", methods=["POST"])
@token_required
def create_client():
    data, errors = validate_client_payload(request.get_json(silent=True))
    if errors:
        raise ValidationError(errors, "Failed to create client")

    client = get_store().create_client(data)
    return jsonify(client.to_dict()), 201


@clients_bp.route("/clients/<client_id>", methods=["PUT"])
@token_required
def update_client(client_id: str):
    data, errors = validate_client_payload(request.get_json(silent=True), partial=True)
    if errors:
        raise ValidationError(errors, "Failed to update client")

    client = get_store().update_client(client_id, data)
    return jsonify(client.to_dict())


@clients_bp.route("/clients/<client_id>", methods=["DELETE"])
@token_required
def delete_client(client_id: str):
    removed = get_store().delete_client(client_id)
    current_app.logger.info("Client %s deleted with %d task(s)", client_id, removed)
    return "", 204
