"""Tests for operator-facing strings."""

from core.domain.errors import CameraErrorKind
from locales import t
from locales.en import EN_STRINGS
from locales.id import ID_STRINGS


def test_languages_define_the_same_keys() -> None:
    assert set(EN_STRINGS) == set(ID_STRINGS)


def test_every_camera_error_kind_has_a_message() -> None:
    for kind in CameraErrorKind:
        assert f"camera_{kind.value}" in EN_STRINGS


def test_unknown_language_falls_back_to_english() -> None:
    assert t("history_empty", "fr") == EN_STRINGS["history_empty"]


def test_formatting_arguments() -> None:
    assert "timeout" in t("error_remote", "en", detail="timeout")
