"""SocketIO event handlers for asynchronous sampling."""
import logging

from flask import current_app, request

from .config import get_sampling_config
from .exceptions import SamplingError
from .samples import bounded_threshold, validate_series

logger = logging.getLogger(__name__)


def register_socketio_handlers(socketio, worker):
    """
    Register sampling SocketIO event handlers.

    Args:
        socketio: flask_socketio.SocketIO instance
        worker: SamplingWorker that runs the reductions
    """

    @socketio.on('sample')
    def handle_sample(data):
        """
        Downsample a series in the background and emit the result.

        Payload: {series, max_points?, value_key?, request_id?}. Emits
        'sample_result' with the worker result, or 'sample_error'.
        """
        sid = request.sid
        data = data if isinstance(data, dict) else {}
        client_request_id = data.get('request_id')
        config = current_app.config.get('SAMPLING') or get_sampling_config()

        try:
            series = validate_series(data.get('series'))
            threshold = bounded_threshold(
                data.get('max_points', config['default_threshold']),
                config['max_threshold'],
                'max_points',
            )
            future = worker.submit(
                series,
                threshold,
                data.get('value_key') or config['value_key'],
            )
        except SamplingError as e:
            socketio.emit('sample_error', {'request_id': client_request_id, 'error': str(e)}, to=sid)
            return

        def on_done(done):
            if done.cancelled():
                socketio.emit('sample_error', {'request_id': client_request_id, 'error': 'cancelled'}, to=sid)
                return
            error = done.exception()
            if error is not None:
                logger.error(f"Sampling for client {sid} failed: {error}")
                socketio.emit('sample_error', {'request_id': client_request_id, 'error': str(error)}, to=sid)
                return
            result = dict(done.result())
            if client_request_id is not None:
                result['request_id'] = client_request_id
            socketio.emit('sample_result', result, to=sid)

        future.add_done_callback(on_done)
