from loguru import logger

from logcatch import EventCapture


def test_log_capture_fixture(log_capture):
    assert isinstance(log_capture, EventCapture)
    assert log_capture.active

    logger.info("Account created")
    assert log_capture.has_info("Account created")


def test_log_capture_factory_fixture(log_capture_factory):
    goanna = log_capture_factory("goanna")
    everything = log_capture_factory()

    logger.bind(origin="goanna").info("alpha")
    logger.bind(origin="skink").info("beta")

    assert goanna.has_info("alpha")
    assert not goanna.has_info("beta")
    assert everything.size() == 2


def test_fixtures_close_captures_at_teardown(pytester):
    pytester.makeconftest(
        """
        import pytest

        kept = []

        @pytest.fixture
        def remember(log_capture, log_capture_factory):
            kept.append(log_capture)
            kept.append(log_capture_factory("x"))
            return kept
        """
    )
    pytester.makepyfile(
        """
        from loguru import logger

        def test_first(remember, log_capture):
            logger.info("hello")
            assert log_capture.has_info("hello")
            assert all(c.active for c in remember)

        def test_second(remember):
            assert all(not c.active for c in remember[:2])
        """
    )
    result = pytester.runpytest()
    result.assert_outcomes(passed=2)
