"""Hosted entry point."""

from ring_bfs.visualization.dash_app import app

server = app.server  # expose Flask server for gunicorn fallback

if __name__ == "__main__":
    from ring_bfs.config import PORT, configure_logging

    configure_logging()
    app.run(host="0.0.0.0", debug=False, port=PORT)
