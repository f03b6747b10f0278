"""
Chart sampling server.

Serves the sampling blueprint over HTTP and the 'sample' SocketIO event for
clients that want reductions pushed back asynchronously.
"""
import argparse
import logging
import os

from flask import Flask
from flask_socketio import SocketIO

from sampling import (
    get_sampling_config,
    register_socketio_handlers,
    sampling_bp,
    start_worker,
)

logger = logging.getLogger(__name__)


def create_app(config=None):
    """
    Build the Flask app and its SocketIO server.

    Args:
        config: Optional sampling config dict; defaults to the config files

    Returns:
        (app, socketio)
    """
    app = Flask(__name__)
    # Generate a random secret key on startup for Flask session management
    app.config['SECRET_KEY'] = os.environ.get('FLASK_SECRET_KEY', os.urandom(24).hex())
    app.config['SAMPLING'] = config or get_sampling_config()
    app.register_blueprint(sampling_bp)

    socketio = SocketIO(app, cors_allowed_origins="*", async_mode='threading')
    register_socketio_handlers(socketio, start_worker())
    return app, socketio


def main():
    parser = argparse.ArgumentParser(
        description='Time-series downsampling service for chart rendering.'
    )
    parser.add_argument('--host', default=os.environ.get('SAMPLING_HOST', '0.0.0.0'),
                        help='Interface to bind (default: 0.0.0.0)')
    parser.add_argument('--port', type=int, default=int(os.environ.get('SAMPLING_PORT', '5000')),
                        help='Port to listen on (default: 5000)')
    parser.add_argument('--debug', action='store_true',
                        help='Run Flask in debug mode')
    parser.add_argument('--log-level', default='INFO',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Logging level (default: INFO)')
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    app, socketio = create_app()
    logger.info(f"Serving chart sampling on {args.host}:{args.port}")
    socketio.run(app, host=args.host, port=args.port, debug=args.debug, allow_unsafe_werkzeug=True)


if __name__ == '__main__':
    main()
