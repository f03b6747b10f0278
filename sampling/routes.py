"""
Flask routes for chart sampling.

The charting layer posts series it already holds and gets them back reduced.
All endpoints answer errors as {'success': False, 'error': message}.
"""

from flask import Blueprint, current_app, jsonify, request

from .config import get_sampling_config
from .exceptions import InvalidSeriesError, SamplingError
from .lttb import lttb_downsample
from .minmax import min_max_sample
from .multi_series import lttb_multi_series_downsample
from .samples import bounded_threshold, validate_series


# Create a Blueprint for sampling routes
sampling_bp = Blueprint('sampling', __name__)


def _sampling_config():
    """Config stored on the app by create_app(), else the process-wide one."""
    return current_app.config.get('SAMPLING') or get_sampling_config()


def _request_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidSeriesError('No data provided')
    return data


def _resolve_threshold(data, key, default_key, config):
    """Take a threshold from the body, falling back to config, bounded by max_threshold."""
    return bounded_threshold(data.get(key, config[default_key]), config['max_threshold'], key)


@sampling_bp.errorhandler(SamplingError)
def handle_sampling_error(error):
    """Report invalid sampling requests as 400."""
    return jsonify({'success': False, 'error': str(error)}), 400


@sampling_bp.route('/api/sampling/config')
def get_config():
    """Get sampling defaults and limits for the frontend."""
    config = _sampling_config()
    return jsonify({
        'threshold': {
            'default': config['default_threshold'],
            'max': config['max_threshold'],
        },
        'buckets': {
            'default': config['default_buckets'],
        },
        'value_key': config['value_key'],
    })


@sampling_bp.route('/api/sampling/lttb', methods=['POST'])
def sample_lttb():
    """
    Downsample one series with LTTB.

    Request body:
        {
            "series": [{"timestamp": ..., "value": ...}, ...],
            "threshold": 500,       // optional
            "value_key": "value"    // optional
        }

    Returns:
        JSON object with success, data, original_length, sampled_length
    """
    config = _sampling_config()
    data = _request_body()
    series = validate_series(data.get('series'))
    threshold = _resolve_threshold(data, 'threshold', 'default_threshold', config)
    value_key = data.get('value_key') or config['value_key']

    sampled = lttb_downsample(series, threshold, value_key)
    return jsonify({
        'success': True,
        'data': sampled,
        'original_length': len(series),
        'sampled_length': len(sampled),
    })


@sampling_bp.route('/api/sampling/lttb/multi', methods=['POST'])
def sample_lttb_multi():
    """
    Downsample several series that are drawn on the same chart.

    Request body:
        {
            "datasets": [{"label": "raw", "series": [...]}, ...],
            "threshold": 500,       // optional
            "value_key": "value"    // optional
        }

    Returns:
        JSON object with success and datasets, each carrying label, series,
        original_length and sampled_length
    """
    config = _sampling_config()
    data = _request_body()
    datasets = data.get('datasets')
    if not isinstance(datasets, list):
        raise InvalidSeriesError('datasets must be a list')
    for position, dataset in enumerate(datasets):
        if not isinstance(dataset, dict):
            raise InvalidSeriesError(f"datasets[{position}] must be an object")
        validate_series(dataset.get('series'), f"datasets[{position}].series")

    threshold = _resolve_threshold(data, 'threshold', 'default_threshold', config)
    value_key = data.get('value_key') or config['value_key']

    sampled = lttb_multi_series_downsample(
        [{'label': d.get('label'), 'series': d['series']} for d in datasets],
        threshold,
        value_key,
        max_workers=config['parallel_workers'],
    )
    return jsonify({
        'success': True,
        'datasets': [
            {
                'label': result['label'],
                'series': result['series'],
                'original_length': len(original['series']),
                'sampled_length': len(result['series']),
            }
            for original, result in zip(datasets, sampled)
        ],
    })


@sampling_bp.route('/api/sampling/minmax', methods=['POST'])
def sample_minmax():
    """
    Keep the min and max sample of each bucket.

    Request body:
        {
            "series": [{"timestamp": ..., "value": ...}, ...],
            "buckets": 250,         // optional
            "value_key": "value"    // optional
        }

    Returns:
        JSON object with success, data, original_length, sampled_length
    """
    config = _sampling_config()
    data = _request_body()
    series = validate_series(data.get('series'))
    buckets = _resolve_threshold(data, 'buckets', 'default_buckets', config)
    value_key = data.get('value_key') or config['value_key']

    sampled = min_max_sample(series, buckets, value_key)
    return jsonify({
        'success': True,
        'data': sampled,
        'original_length': len(series),
        'sampled_length': len(sampled),
    })
