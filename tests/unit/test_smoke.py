"""
Smoke tests to verify all critical dependencies are installed correctly.

These tests confirm that:
1. Python 3.11+ is installed
2. Core dependencies are importable
3. Project version is accessible
"""

import sys

import pytest


class TestPythonVersion:
    """Verify Python version requirements."""

    def test_python_311_or_higher(self) -> None:
        assert sys.version_info >= (3, 11), (
            f"Python 3.11+ required, "
            f"got {sys.version_info.major}.{sys.version_info.minor}"
        )


class TestDependencies:
    """Verify third-party dependencies."""

    def test_structlog_import(self) -> None:
        import structlog

        assert structlog.get_logger() is not None

    def test_pytest_asyncio_import(self) -> None:
        import pytest_asyncio

        assert pytest_asyncio is not None


class TestProjectMetadata:
    def test_version(self, project_version: str) -> None:
        assert project_version == "0.1.0"

    @pytest.mark.asyncio
    async def test_async_tests_run(self) -> None:
        import asyncio

        await asyncio.sleep(0)
