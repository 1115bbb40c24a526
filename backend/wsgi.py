try:
    from backend.brokenphone.server import create_app
except ImportError:  # pragma: no cover
    from brokenphone.server import create_app

app, socketio = create_app()
