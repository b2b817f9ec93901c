"""Tessellation precision settings and their dynamic scope.

The active ``Settings`` live in a ``contextvars.ContextVar``.  Code that
wants a finer (or coarser) mesh wraps the generation in a ``precision``
block::

    with precision(fragment_minimum_angle=deg(2)):
        mesh = cylinder(Location(), mm(3), mm(5)).generate_mesh()

The previous settings come back when the block exits, whether or not it
raised.  Blocks nest, and a nested block inherits every field it does
not override.  Each thread starts from ``DEFAULT_SETTINGS``.

Settings can also be read from a YAML file::

    fragment_minimum_angle: 6   # degrees
    max_workers: 4
"""

from __future__ import annotations

import dataclasses
import logging
import os
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Iterator, Optional, TextIO, Union

import yaml

from typedcad.units import Angle, deg, isgoodnum

logger = logging.getLogger(__name__)

_FULL_TURN = deg(360)


@dataclass(frozen=True)
class Settings:
    """Knobs that control tessellation.

    ``fragment_minimum_angle`` is the angular step between neighbouring
    ring points on round primitives.  ``max_workers`` caps the thread
    pool used for spheres; ``None`` lets the executor pick.
    """

    fragment_minimum_angle: Angle = field(default_factory=lambda: deg(12))
    max_workers: Optional[int] = None

    def __post_init__(self):
        a = self.fragment_minimum_angle
        if not isinstance(a, Angle):
            raise TypeError('fragment_minimum_angle must be an Angle, got {!r}'.format(a))
        if not (a > Angle.ZERO and a <= _FULL_TURN):
            raise ValueError('bad fragment_minimum_angle {}: must be in (0°, 360°]'.format(a))
        w = self.max_workers
        if w is not None:
            if isinstance(w, bool) or not isinstance(w, int):
                raise ValueError('bad max_workers: {!r}'.format(w))
            if w < 1:
                raise ValueError('max_workers must be at least 1, got {}'.format(w))

    def replace(self, **overrides) -> 'Settings':
        return dataclasses.replace(self, **overrides)


DEFAULT_SETTINGS = Settings()

_current: ContextVar[Settings] = ContextVar('typedcad_settings', default=DEFAULT_SETTINGS)


def current_settings() -> Settings:
    return _current.get()


def fragment_minimum_angle() -> Angle:
    """the angular step currently in effect"""
    return _current.get().fragment_minimum_angle


@contextmanager
def precision(settings: Optional[Settings] = None, **overrides) -> Iterator[Settings]:
    """Make ``settings`` (or the current settings with ``overrides``
    applied) active for the body of the ``with`` block."""
    base = settings if settings is not None else _current.get()
    if not isinstance(base, Settings):
        raise TypeError('precision() expects a Settings instance, got {!r}'.format(base))
    active = base.replace(**overrides) if overrides else base
    token = _current.set(active)
    logger.debug('entering precision scope %s', active)
    try:
        yield active
    finally:
        _current.reset(token)
        logger.debug('left precision scope, restored %s', _current.get())


_KNOWN_KEYS = ('fragment_minimum_angle', 'max_workers')


def settings_from_mapping(data: dict, base: Settings = DEFAULT_SETTINGS) -> Settings:
    """Build ``Settings`` from plain values; angles are given in degrees."""
    unknown = sorted(set(data) - set(_KNOWN_KEYS))
    if unknown:
        raise ValueError('unknown settings keys: {}'.format(', '.join(map(str, unknown))))
    overrides = {}
    if 'fragment_minimum_angle' in data:
        value = data['fragment_minimum_angle']
        if not isgoodnum(value):
            raise ValueError('bad fragment_minimum_angle: {!r}'.format(value))
        overrides['fragment_minimum_angle'] = deg(value)
    if 'max_workers' in data:
        overrides['max_workers'] = data['max_workers']
    return base.replace(**overrides)


def load_settings(path_or_stream: Union[str, os.PathLike, TextIO]) -> Settings:
    """Read settings from a YAML file path or an open text stream.

    An empty document gives ``DEFAULT_SETTINGS``.
    """
    if hasattr(path_or_stream, 'read'):
        data = yaml.safe_load(path_or_stream)
        source = getattr(path_or_stream, 'name', '<stream>')
    else:
        with open(path_or_stream, 'r', encoding='utf-8') as fp:
            data = yaml.safe_load(fp)
        source = os.fspath(path_or_stream)

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError('settings file {} must hold a mapping, got {}'.format(
            source, type(data).__name__))

    settings = settings_from_mapping(data)
    logger.debug('loaded %s from %s', settings, source)
    return settings


@contextmanager
def use_settings_file(path_or_stream) -> Iterator[Settings]:
    """``precision(load_settings(path_or_stream))``"""
    with precision(load_settings(path_or_stream)) as active:
        yield active


__all__ = [
    'Settings',
    'DEFAULT_SETTINGS',
    'current_settings',
    'fragment_minimum_angle',
    'precision',
    'settings_from_mapping',
    'load_settings',
    'use_settings_file',
]
