from __future__ import annotations

import os
import uuid

from flask import (
    Blueprint,
    current_app,
    jsonify,
    request,
    send_from_directory,
)
from werkzeug.utils import secure_filename

from extensions import get_store
from practice.auth.security import token_required
from practice.errors import TaskNotFoundError, ValidationError
from practice.reports.services import DocumentService


documents_bp = Blueprint("documents", __name__)


# ---------- Helpers ----------

def _ext_of(filename: str) -> str:
    base = filename.rsplit("/", 1)[-1]
    parts = base.rsplit(".", 1)
    return parts[-1].lower() if len(parts) == 2 else ""


def _upload_dir() -> str:
    path = current_app.config["UPLOAD_FOLDER"]
    os.makedirs(path, exist_ok=True)
    return path


# ---------- API ----------

@documents_bp.route("/api/upload", methods=["POST"])
@token_required
def upload_file():
    file = request.files.get("file")
    if not file or not file.filename:
        return jsonify({"message": "No file uploaded"}), 400

    task_id = (request.form.get("taskId") or "").strip()
    store = get_store()
    if task_id:
        # fail before touching the disk
        store.get_task(task_id)

    original = file.filename
    ext = _ext_of(secure_filename(original))
    unique = uuid.uuid4().hex + (f".{ext}" if ext else "")
    saved_path = os.path.join(_upload_dir(), unique)
    file.save(saved_path)

    file_url = f"/uploads/{unique}"
    current_app.logger.info("Stored upload %r as %s", original, unique)

    body = {"fileUrl": file_url, "originalName": original}
    if task_id:
        try:
            body["task"] = store.attach_file(task_id, file_url).to_dict()
        except TaskNotFoundError:
            # task vanished after the check above
            os.remove(saved_path)
            raise
    return jsonify(body)


@documents_bp.route("/api/documents")
@token_required
def list_documents():
    q = (request.args.get("q") or "").strip()
    store = get_store()
    documents = DocumentService.list_documents(store.list_clients(), store.list_tasks(), q or None)
    return jsonify(documents)


@documents_bp.route("/uploads/<path:filename>")
@token_required
def download_file(filename: str):
    safe = secure_filename(filename)
    if not safe or safe != filename:
        raise ValidationError({"filename": "invalid file name"})
    return send_from_directory(_upload_dir(), safe)
