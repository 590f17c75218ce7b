import asyncio
import logging

from salary_api.main import _train_in_background


class ExplodingEnsemble:
    is_trained = False

    def initialize(self) -> bool:
        raise RuntimeError("database unavailable")

    def train_advanced(self) -> bool:
        raise AssertionError("not reached")


def test_training_errors_are_logged_not_raised(caplog) -> None:
    with caplog.at_level(logging.ERROR, logger="salary_api.main"):
        asyncio.run(_train_in_background(ExplodingEnsemble(), 0, 0))
    assert "Background ensemble training failed" in caplog.text


def test_cancellation_still_propagates() -> None:
    async def run() -> bool:
        task = asyncio.create_task(_train_in_background(ExplodingEnsemble(), 60, 0))
        await asyncio.sleep(0)
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            return True
        return False

    assert asyncio.run(run()) is True
