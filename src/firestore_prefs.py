"""Firestore-backed key-value string store for app preferences.

All keys live as fields of a single document so a load is one read.
"""

from __future__ import annotations

import os

COLLECTION = "preferences"
DEFAULT_DOCUMENT = "default"


def _get_client():
    """Return a Firestore client (lazy import to avoid import-time errors).

    Respects ``CALENDAR_MEMO_FIRESTORE_DATABASE`` to select a non-default
    database and ``GOOGLE_CLOUD_PROJECT`` for the project ID.
    """
    from google.cloud import firestore

    kwargs: dict[str, str] = {}
    database = os.environ.get("CALENDAR_MEMO_FIRESTORE_DATABASE")
    if database:
        kwargs["database"] = database
    project = os.environ.get("GOOGLE_CLOUD_PROJECT")
    if project:
        kwargs["project"] = project
    return firestore.Client(**kwargs)


def _document():
    doc_id = os.environ.get("CALENDAR_MEMO_PREFS_DOC") or DEFAULT_DOCUMENT
    return _get_client().collection(COLLECTION).document(doc_id)


def get_string(key: str, default: str = "") -> str:
    """Return the string stored under *key*, or *default* if unset."""
    doc = _document().get()
    if not doc.exists:
        return default
    value = (doc.to_dict() or {}).get(key)
    if value is None:
        return default
    return str(value)


def set_string(key: str, value: str) -> None:
    """Store *value* under *key*, leaving other keys untouched."""
    _document().set({key: value}, merge=True)
