"""Small helpers for reading submitted forms and re-showing them after errors."""
from decimal import Decimal, InvalidOperation
from urllib.parse import urlsplit

from flask import flash, session

FORM_DATA_KEY = "form_data"


def text(form, name):
    return (form.get(name) or "").strip()


def optional_int(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def optional_decimal(value):
    if value is None or str(value).strip() == "":
        return None
    try:
        number = Decimal(str(value).strip().replace(",", "."))
    except InvalidOperation:
        return None
    return number if number.is_finite() else None


def remember_form(name, form, exclude=("password",)):
    """Keep submitted values for one redisplay of the ``name`` form."""
    data = {key: form.get(key) for key in form.keys() if key not in exclude}
    session[FORM_DATA_KEY] = {"form": name, "data": data}


def recall_form(name, default=None):
    stored = session.pop(FORM_DATA_KEY, None)
    if stored and stored.get("form") == name:
        return stored.get("data") or {}
    return default if default is not None else {}


def flash_errors(error):
    """Flash a ValidationError: the summary plus one ``error_<field>`` per field."""
    flash(error.message, "error")
    for field, message in error.errors.items():
        flash(message, f"error_{field}")


def safe_target(target, fallback):
    """Only same-site relative paths are accepted as redirect targets."""
    if not target:
        return fallback
    parts = urlsplit(target)
    if parts.scheme or parts.netloc or not target.startswith("/") or target.startswith(("//", "/\\")):
        return fallback
    return target
