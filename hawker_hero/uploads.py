import os
import time

from flask import current_app
from werkzeug.utils import secure_filename

from .errors import ValidationError

ALLOWED_EXTENSIONS = {"png", "jpg", "jpeg", "gif", "webp"}


def allowed_file(filename: str) -> bool:
    return "." in filename and filename.rsplit(".", 1)[1].lower() in ALLOWED_EXTENSIONS


def save_image(upload, subfolder=""):
    """Store an uploaded image and return the name to keep in the row.

    Returns ``None`` when nothing was uploaded.
    """
    if upload is None or not upload.filename:
        return None
    if not allowed_file(upload.filename):
        raise ValidationError({"image": "Allowed image types: png, jpg, jpeg, gif, webp"})
    filename = f"{int(time.time() * 1000)}-{secure_filename(upload.filename)}"
    folder = os.path.join(current_app.config["UPLOAD_FOLDER"], subfolder)
    os.makedirs(folder, exist_ok=True)
    upload.save(os.path.join(folder, filename))
    return f"{subfolder}/{filename}" if subfolder else filename


def discard_image(name):
    if not name:
        return
    path = os.path.join(current_app.config["UPLOAD_FOLDER"], name)
    if os.path.isfile(path):
        os.remove(path)
