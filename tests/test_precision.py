import io
import threading

import pytest

from typedcad.precision import (
    DEFAULT_SETTINGS,
    Settings,
    current_settings,
    fragment_minimum_angle,
    load_settings,
    precision,
    settings_from_mapping,
    use_settings_file,
)
from typedcad.units import deg, mm


def test_defaults():
    assert DEFAULT_SETTINGS.fragment_minimum_angle == deg(12)
    assert DEFAULT_SETTINGS.max_workers is None
    assert current_settings() == DEFAULT_SETTINGS
    assert fragment_minimum_angle() == deg(12)


class TestValidation:

    @pytest.mark.parametrize('angle', [0, -5, 361])
    def test_bad_angle(self, angle):
        with pytest.raises(ValueError):
            Settings(fragment_minimum_angle=deg(angle))

    def test_angle_type(self):
        with pytest.raises(TypeError):
            Settings(fragment_minimum_angle=mm(3))

    @pytest.mark.parametrize('workers', [0, -1, 2.5, True])
    def test_bad_workers(self, workers):
        with pytest.raises(ValueError):
            Settings(max_workers=workers)

    def test_full_turn_is_allowed(self):
        assert Settings(fragment_minimum_angle=deg(360)).fragment_minimum_angle == deg(360)


class TestScope:

    def test_override_and_restore(self):
        with precision(fragment_minimum_angle=deg(2)) as s:
            assert s.fragment_minimum_angle == deg(2)
            assert fragment_minimum_angle() == deg(2)
        assert fragment_minimum_angle() == deg(12)

    def test_explicit_settings(self):
        with precision(Settings(fragment_minimum_angle=deg(30), max_workers=2)):
            assert current_settings().max_workers == 2
        assert current_settings() == DEFAULT_SETTINGS

    def test_nesting_inherits(self):
        with precision(max_workers=3):
            with precision(fragment_minimum_angle=deg(6)):
                s = current_settings()
                assert s.max_workers == 3
                assert s.fragment_minimum_angle == deg(6)
            assert current_settings().fragment_minimum_angle == deg(12)
            assert current_settings().max_workers == 3
        assert current_settings().max_workers is None

    def test_restored_after_exception(self):
        with pytest.raises(RuntimeError):
            with precision(fragment_minimum_angle=deg(1)):
                raise RuntimeError('boom')
        assert fragment_minimum_angle() == deg(12)

    def test_bad_override(self):
        with pytest.raises(ValueError):
            with precision(fragment_minimum_angle=deg(0)):
                pass
        assert current_settings() == DEFAULT_SETTINGS

    def test_not_settings(self):
        with pytest.raises(TypeError):
            with precision({'max_workers': 2}):
                pass

    def test_threads_are_isolated(self):
        entered = threading.Event()
        release = threading.Event()
        seen = {}

        def worker():
            with precision(fragment_minimum_angle=deg(3)):
                seen['inside'] = fragment_minimum_angle()
                entered.set()
                release.wait(5)

        t = threading.Thread(target=worker)
        t.start()
        assert entered.wait(5)
        try:
            assert fragment_minimum_angle() == deg(12)
        finally:
            release.set()
            t.join(5)
        assert seen['inside'] == deg(3)


class TestYaml:

    def test_load_stream(self):
        s = load_settings(io.StringIO('fragment_minimum_angle: 6\nmax_workers: 4\n'))
        assert s.fragment_minimum_angle == deg(6)
        assert s.max_workers == 4

    def test_load_path(self, tmp_path):
        path = tmp_path / 'typedcad.yaml'
        path.write_text('fragment_minimum_angle: 7.5\n', encoding='utf-8')
        s = load_settings(path)
        assert s.fragment_minimum_angle == deg(7.5)
        assert s.max_workers is None

    def test_empty_document(self):
        assert load_settings(io.StringIO('')) == DEFAULT_SETTINGS

    def test_unknown_key(self):
        with pytest.raises(ValueError):
            load_settings(io.StringIO('fragment_angle: 6\n'))

    def test_not_a_mapping(self):
        with pytest.raises(ValueError):
            load_settings(io.StringIO('- 1\n- 2\n'))

    def test_bad_values(self):
        with pytest.raises(ValueError):
            load_settings(io.StringIO('fragment_minimum_angle: fine\n'))
        with pytest.raises(ValueError):
            load_settings(io.StringIO('max_workers: 0\n'))

    def test_from_mapping(self):
        s = settings_from_mapping({'max_workers': 1})
        assert s.max_workers == 1
        assert s.fragment_minimum_angle == deg(12)

    def test_use_settings_file(self, tmp_path):
        path = tmp_path / 'coarse.yaml'
        path.write_text('fragment_minimum_angle: 45\n', encoding='utf-8')
        with use_settings_file(path) as s:
            assert s.fragment_minimum_angle == deg(45)
            assert fragment_minimum_angle() == deg(45)
        assert fragment_minimum_angle() == deg(12)
