"""Time-series downsampling for chart rendering."""

from .exceptions import SamplingError, InvalidThresholdError, InvalidSeriesError
from .samples import numeric_value, validate_threshold
from .lttb import lttb_downsample
from .multi_series import lttb_multi_series_downsample
from .minmax import min_max_sample
from .config import get_sampling_config, load_sampling_config, reload_sampling_config
from .worker import SamplingWorker, get_worker, start_worker, stop_worker
from .routes import sampling_bp
from .socketio_handlers import register_socketio_handlers
