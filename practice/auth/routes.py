from flask import Blueprint, current_app, g, jsonify, request

from extensions import get_store
from practice.errors import ConflictError, ValidationError
from .forms import validate_login_payload, validate_register_payload
from .security import check_password, hash_password, issue_token, token_required

auth_bp = Blueprint("auth", __name__, url_prefix="/api")


@auth_bp.route("/login", methods=["POST"])
def login():
    data, errors = validate_login_payload(request.get_json(silent=True))
    if errors:
        raise ValidationError(errors)

    store = get_store()
    user = store.get_user_by_username(data["username"])
    if user is None or not check_password(data["password"], user.password):
        current_app.logger.warning("Failed login for username %r", data["username"])
        return jsonify({"message": "Invalid credentials"}), 401

    return jsonify({"token": issue_token(user.id), "user": user.to_dict()})


@auth_bp.route("/register", methods=["POST"])
def register():
    data, errors = validate_register_payload(request.get_json(silent=True))
    if errors:
        raise ValidationError(errors, "Registration failed")

    store = get_store()
    if store.get_user_by_username(data["username"]) is not None:
        raise ConflictError("Username already exists")

    user = store.create_user({**data, "password": hash_password(data["password"])})
    current_app.logger.info("Registered user %r", user.username)
    return jsonify({"token": issue_token(user.id), "user": user.to_dict()}), 201


@auth_bp.route("/me")
@token_required
def me():
    return jsonify(get_store().get_user(g.user_id).to_dict())
