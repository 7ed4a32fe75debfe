"""
envtracing - Logging Configuration
Console logging with trace id correlation for request logs
"""

import logging
import logging.config
import sys

from ..tracing.extract import extract_trace_id

class TraceIdLogFilter(logging.Filter):
    """Attach the active trace id (or "-") to every log record"""

    def filter(self, record: logging.LogRecord) -> bool:
        trace_id, found = extract_trace_id()
        record.trace_id = trace_id if found else "-"
        return True

def setup_logging(level: str = "INFO", service_name: str = "envtracing"):
    """Setup application logging configuration"""

    config = {
        'version': 1,
        'disable_existing_loggers': False,
        'filters': {
            'trace_id': {
                '()': TraceIdLogFilter,
            }
        },
        'formatters': {
            'detailed': {
                'format': '[%(asctime)s] %(levelname)s [%(name)s:%(lineno)d] [trace_id=%(trace_id)s] %(message)s',
                'datefmt': '%Y-%m-%d %H:%M:%S'
            },
            'simple': {
                'format': '%(levelname)s %(message)s'
            }
        },
        'handlers': {
            'console': {
                'level': level,
                'class': 'logging.StreamHandler',
                'formatter': 'detailed',
                'filters': ['trace_id'],
                'stream': sys.stdout
            }
        },
        'loggers': {
            '': {  # Root logger
                'level': level,
                'handlers': ['console'],
                'propagate': False
            }
        }
    }

    logging.config.dictConfig(config)

    # Strategy polling retries are noisy at DEBUG
    logging.getLogger('urllib3').setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.info(f"{service_name} logging initialized - Level: {level}")
