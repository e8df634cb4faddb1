"""AWS Lambda handler for the Bangla tithi cache sync."""
import json
import logging
import os
import time
from datetime import datetime
from typing import Dict, Any

import pytz

from processor.bangla_calendar import to_bangla_date
from processor.formatting import format_bangla_date
from source.tithi_source import TithiDataSource
from storage.cache_store import CacheStore
from storage.dynamodb_store import DynamoDBKeyValueStore


_RESERVED_RECORD_ATTRS = frozenset(
    logging.LogRecord('', 0, '', 0, '', (), None).__dict__
) | {'message', 'asctime'}

_TRUE_VALUES = ('1', 'true', 'yes', 'on')


def _parse_flag(value: Any) -> bool:
    """Interpret a payload flag; strings such as 'false' are not truthy."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in _TRUE_VALUES


# Configure JSON logging
class JsonFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'message': record.getMessage(),
            'logger': record.name
        }

        # Fields passed through extra=
        for key, value in record.__dict__.items():
            if key not in _RESERVED_RECORD_ATTRS and key not in log_data:
                log_data[key] = value

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)


def setup_logging(log_level: str = 'INFO') -> None:
    """
    Configure logging with JSON formatter.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    root_logger = logging.getLogger()

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root_logger.addHandler(handler)

    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))


def _error_response(message: str, error: Exception, start_time: float, **fields) -> Dict[str, Any]:
    body = {
        'message': message,
        'error': str(error),
        'error_type': type(error).__name__,
        'duration_seconds': round(time.time() - start_time, 2)
    }
    body.update(fields)
    return {'statusCode': 500, 'body': json.dumps(body, ensure_ascii=False)}


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Refresh the tithi cache when it is stale.

    The event payload may carry 'year', 'month', 'month_count' and 'force'
    to override the fetch window and the staleness check.

    Args:
        event: EventBridge event payload
        context: Lambda context object

    Returns:
        Response dict with statusCode and summary statistics
    """
    # Read configuration from environment variables
    table_name = os.environ.get('TABLE_NAME', 'bangla-tithi-cache')
    log_level = os.environ.get('LOG_LEVEL', 'INFO')
    data_url = os.environ.get('DATA_URL') or None
    month_count = int(os.environ.get('MONTH_COUNT', '6'))
    timeout_seconds = int(os.environ.get('TIMEOUT_SECONDS', '30'))
    display_timezone = os.environ.get('DISPLAY_TIMEZONE', 'Asia/Dhaka')

    setup_logging(log_level)
    logger = logging.getLogger(__name__)

    event = event or {}
    today = datetime.now(pytz.timezone(display_timezone)).date()
    year = int(event.get('year', today.year))
    month = int(event.get('month', today.month))
    month_count = int(event.get('month_count', month_count))
    force = _parse_flag(event.get('force', False))

    start_time = time.time()
    logger.info(
        "Lambda execution started",
        extra={
            'table_name': table_name,
            'year': year,
            'month': month,
            'month_count': month_count,
            'force': force
        }
    )

    try:
        source = TithiDataSource(data_url=data_url, timeout=timeout_seconds)
        cache = CacheStore(DynamoDBKeyValueStore(table_name=table_name))

        removed_keys = cache.initialize()
        today_bangla = format_bangla_date(to_bangla_date(today))

        if not force and not cache.is_stale():
            logger.info("Cache is fresh, skipping sync")
            return {
                'statusCode': 200,
                'body': json.dumps({
                    'message': 'Cache is fresh',
                    'today': today_bangla,
                    'statistics': {
                        'legacy_keys_removed': len(removed_keys),
                        'duration_seconds': round(time.time() - start_time, 2)
                    }
                }, ensure_ascii=False)
            }

        try:
            logger.info("Fetching events from data source")
            fetched = source.fetch_range(year, month, month_count)
            logger.info(f"Fetched {len(fetched)} events from data source")
        except Exception as e:
            logger.error(
                f"Failed to fetch tithi data after retries: {str(e)}",
                extra={'error_type': type(e).__name__},
                exc_info=True
            )
            return _error_response('Failed to fetch tithi data', e, start_time)

        logger.info("Merging events into cache")
        merge_result = cache.merge(fetched)

        duration = time.time() - start_time
        logger.info(
            "Lambda execution completed successfully",
            extra={
                'duration_seconds': round(duration, 2),
                'events_added': merge_result.added,
                'events_updated': merge_result.updated,
                'events_evicted': merge_result.evicted,
                'errors': merge_result.errors
            }
        )

        return {
            'statusCode': 200,
            'body': json.dumps({
                'message': 'Sync completed successfully',
                'today': today_bangla,
                'statistics': {
                    'events_fetched': len(fetched),
                    'events_added': merge_result.added,
                    'events_updated': merge_result.updated,
                    'events_evicted': merge_result.evicted,
                    'events_cached': len(merge_result.events),
                    'persisted': merge_result.persisted,
                    'legacy_keys_removed': len(removed_keys),
                    'duration_seconds': round(duration, 2)
                },
                'errors': merge_result.errors
            }, ensure_ascii=False)
        }

    except Exception as e:
        logger.error(
            f"Lambda execution failed: {str(e)}",
            extra={
                'duration_seconds': round(time.time() - start_time, 2),
                'error_type': type(e).__name__
            },
            exc_info=True
        )
        return _error_response('Sync failed', e, start_time)
