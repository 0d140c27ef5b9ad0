from __future__ import annotations

import os
from collections.abc import Callable, Generator

import pytest

from app.config import AppSettings, LayoutSettings


def _clear_flowlayout_env() -> None:
    for key in list(os.environ):
        if key.startswith("FLOWLAYOUT_"):
            os.environ.pop(key, None)


_clear_flowlayout_env()


@pytest.fixture(autouse=True)
def clear_flowlayout_env() -> Generator[None, None, None]:
    _clear_flowlayout_env()
    yield
    _clear_flowlayout_env()


@pytest.fixture
def layout_settings() -> LayoutSettings:
    return LayoutSettings()


@pytest.fixture
def layout_settings_factory(layout_settings: LayoutSettings) -> Callable[..., LayoutSettings]:
    def _factory(**overrides: object) -> LayoutSettings:
        return layout_settings.model_copy(update=overrides)

    return _factory


@pytest.fixture
def app_settings_factory(
    layout_settings_factory: Callable[..., LayoutSettings],
) -> Callable[..., AppSettings]:
    def _factory(**overrides: object) -> AppSettings:
        return AppSettings(layout=layout_settings_factory(**overrides))

    return _factory
