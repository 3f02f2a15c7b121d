from flask import current_app


def get_poll_manager():
    """The PollLifecycleManager built by create_app()."""
    return current_app.extensions["poll_manager"]
