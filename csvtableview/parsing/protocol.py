#!/usr/bin/env python3
"""
Request/response protocol for the load pipeline

Requests and responses are plain mappings with camelCase keys, so a host can
ship them over any transport (Qt signals, JSON on stdout, a message channel).
Failures come back as ``{"errorMessage": ...}`` and never carry a partial
table. That includes malformed request values such as a two-character
delimiter or a zero batch size.
"""

import logging
from typing import Any, Dict, Mapping

from .delimiter import AUTO
from .pipeline import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_MAX_ROWS,
    TableLoadError,
    initial_load,
    load_more,
)

logger = logging.getLogger(__name__)

LOAD_MORE_ERROR_PREFIX = "Failed to load more rows: "


def error_response(message: str) -> Dict[str, Any]:
    return {'errorMessage': message}


def is_error_response(response: Mapping[str, Any]) -> bool:
    return 'errorMessage' in response


def handle_initial_load(request: Mapping[str, Any]) -> Dict[str, Any]:
    """Serve an InitialLoad request"""
    try:
        result = initial_load(
            request.get('text', ''),
            request.get('configuredDelimiter', AUTO),
            request.get('maxRowsConfig', DEFAULT_MAX_ROWS),
        )
    except TableLoadError as e:
        return error_response(str(e))
    except (ValueError, TypeError) as e:
        logger.warning("Rejected initial load request: %s", e)
        return error_response(f"Invalid request: {e}")
    return result.to_response()


def handle_load_more(request: Mapping[str, Any]) -> Dict[str, Any]:
    """Serve a LoadMore request"""
    try:
        result = load_more(
            request.get('text', ''),
            request.get('configuredDelimiter', AUTO),
            request.get('currentRowCount', 0),
            request.get('batchSize', DEFAULT_BATCH_SIZE),
        )
    except TableLoadError as e:
        logger.warning("Load more failed: %s", e)
        return error_response(f"{LOAD_MORE_ERROR_PREFIX}{e}")
    except (ValueError, TypeError) as e:
        logger.warning("Rejected load more request: %s", e)
        return error_response(f"{LOAD_MORE_ERROR_PREFIX}Invalid request: {e}")
    return result.to_response()
