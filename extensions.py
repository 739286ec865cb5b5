from flask import Flask, current_app

from practice.store import PracticeStore

STORE_KEY = "practice_store"


def init_store(app: Flask, store: PracticeStore) -> PracticeStore:
    app.extensions[STORE_KEY] = store
    return store


def get_store() -> PracticeStore:
    """The store attached to the running app."""
    return current_app.extensions[STORE_KEY]
