"""
Unit Tests for the application logger and request logging
"""
import logging
from unittest.mock import patch

import pytest
from httpx import AsyncClient

from trackerpro.core.logging_config import logger, TrackerProLogger


class TestLogRequest:

    def test_logger_class(self):
        assert isinstance(logger, TrackerProLogger)

    @pytest.mark.parametrize('status_code, level', [
        (200, logging.INFO),
        (404, logging.WARNING),
        (503, logging.ERROR),
    ])
    def test_level_follows_status(self, status_code, level):
        with patch.object(logger, 'log') as mock_log:
            logger.log_request('GET', '/api/v1/auth/me', status_code, 12.5)

        args, kwargs = mock_log.call_args
        assert args[0] == level
        assert '/api/v1/auth/me' in args[1]
        assert kwargs['extra']['http_status'] == status_code
        assert kwargs['extra']['event_type'] == 'http_request_complete'


class TestRequestLoggingMiddleware:

    @pytest.mark.asyncio
    async def test_completed_request_is_logged(self, client: AsyncClient):
        with patch.object(logger, 'log_request') as mock_log_request:
            response = await client.get('/api/v1/health/live')

        assert response.status_code == 200
        mock_log_request.assert_called_once()
        method, path, status_code, duration_ms = mock_log_request.call_args.args
        assert (method, path, status_code) == ('GET', '/api/v1/health/live', 200)
        assert duration_ms >= 0

    @pytest.mark.asyncio
    async def test_skipped_paths_are_not_logged(self, client: AsyncClient):
        with patch.object(logger, 'log_request') as mock_log_request:
            await client.get('/health')

        mock_log_request.assert_not_called()
