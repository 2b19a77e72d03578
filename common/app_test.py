"""Unit tests for common/app.py."""

import contextlib
import logging
import unittest
from collections.abc import AsyncGenerator

import fastapi
import fastapi.testclient

import common.app

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


class TestHealthCheckFilter(unittest.TestCase):
    """Tests for the HealthCheckFilter logging filter."""

    def _record(self, path: str) -> logging.LogRecord:
        return logging.LogRecord(
            name='uvicorn.access',
            level=logging.INFO,
            pathname='',
            lineno=0,
            msg='%s - "%s %s HTTP/%s" %d',
            args=('127.0.0.1', 'GET', path, '1.1', 200),
            exc_info=None,
        )

    def test_health_path_filtered(self) -> None:
        """Health check requests are suppressed by the filter."""
        f = common.app.HealthCheckFilter()
        self.assertFalse(f.filter(self._record('/health')))

    def test_other_path_not_filtered(self) -> None:
        """Non-health-check requests are not suppressed by the filter."""
        f = common.app.HealthCheckFilter()
        self.assertTrue(f.filter(self._record('/island')))


class TestConfigureLogging(unittest.TestCase):
    """Tests for configure_logging()."""

    def setUp(self) -> None:
        self.root_level = logging.getLogger().level

    def tearDown(self) -> None:
        logging.getLogger().setLevel(self.root_level)

    def test_adds_filter_to_uvicorn_access_logger(self) -> None:
        """configure_logging() installs HealthCheckFilter on uvicorn.access."""
        common.app.configure_logging()
        logger = logging.getLogger('uvicorn.access')
        self.assertTrue(
            any(isinstance(f, common.app.HealthCheckFilter) for f in logger.filters)
        )

    def test_filter_installed_once(self) -> None:
        """Calling configure_logging() twice does not stack filters."""
        common.app.configure_logging()
        common.app.configure_logging()
        logger = logging.getLogger('uvicorn.access')
        count = sum(isinstance(f, common.app.HealthCheckFilter) for f in logger.filters)
        self.assertEqual(count, 1)

    def test_sets_root_level(self) -> None:
        """An explicit level is applied to the root logger."""
        common.app.configure_logging('DEBUG')
        self.assertEqual(logging.getLogger().level, logging.DEBUG)


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------


class TestCreateApp(unittest.TestCase):
    """Tests for the create_app factory."""

    def test_returns_fastapi_instance(self) -> None:
        """create_app returns a FastAPI instance."""
        app = common.app.create_app('TestApp')
        self.assertIsInstance(app, fastapi.FastAPI)

    def test_title_is_set(self) -> None:
        """create_app sets the app title."""
        app = common.app.create_app('MyTitle')
        self.assertEqual(app.title, 'MyTitle')

    def test_health_endpoint_registered(self) -> None:
        """create_app registers the /health endpoint."""
        app = common.app.create_app('TestApp')
        client = fastapi.testclient.TestClient(app)
        response = client.get('/health')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {'status': 'healthy'})

    def test_health_head_method(self) -> None:
        """create_app health endpoint accepts HEAD requests."""
        app = common.app.create_app('TestApp')
        client = fastapi.testclient.TestClient(app)
        response = client.head('/health')
        self.assertEqual(response.status_code, 200)

    def test_kwargs_forwarded_to_fastapi(self) -> None:
        """Extra kwargs (e.g. lifespan) are forwarded to FastAPI."""

        @contextlib.asynccontextmanager
        async def my_lifespan(app: fastapi.FastAPI) -> AsyncGenerator[None, None]:
            yield

        app = common.app.create_app('TestApp', lifespan=my_lifespan)
        self.assertIsInstance(app, fastapi.FastAPI)


if __name__ == '__main__':
    unittest.main()
