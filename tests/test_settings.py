"""Tests for the Settings model, YAML settings files, the caption and the CLI.

Run:
    pytest tests/test_settings.py -v
"""

import math

import pytest
from pydantic import ValidationError

from generateGrid import (PAGE_SIZES, Settings, describe, generate, load_yaml,
                          main, settings_to_yaml)


def test_defaults_match_a4():
    settings = Settings()
    assert settings.page_width_mm == 210
    assert settings.page_height_mm == 297
    assert settings.rectangle_x == pytest.approx(55)
    assert settings.rectangle_y == pytest.approx(108.5)
    assert settings.grid_type == 'lines'


@pytest.mark.parametrize('raw, expected', [
    ('12.5', 12.5),
    (7, 7.0),
    ('', 0.0),
    ('abc', 0.0),
    (None, 0.0),
    (math.nan, 0.0),
    (math.inf, 0.0),
    ('-inf', 0.0),
    (-3, -3.0),
])
def test_numeric_input_is_coerced(raw, expected):
    assert Settings(grid_spacing_x=raw).grid_spacing_x == expected


@pytest.mark.parametrize('unit, factor', [('mm', 1), ('cm', 10), ('in', 25.4)])
def test_unit_conversion(unit, factor):
    settings = Settings(page_width=3, page_height=4, page_unit=unit)
    assert settings.page_width_mm == pytest.approx(3 * factor)
    assert settings.page_height_mm == pytest.approx(4 * factor)


def test_settings_are_frozen():
    settings = Settings()
    with pytest.raises(ValidationError):
        settings.page_width = 100


@pytest.mark.parametrize('field, value', [('page_unit', 'pt'), ('grid_type', 'hatch')])
def test_unknown_choices_are_rejected(field, value):
    with pytest.raises(ValidationError):
        Settings(**{field: value})


def test_presets_agree_across_units():
    for sizes in PAGE_SIZES.values():
        mm = Settings(page_width=sizes['mm'][0], page_height=sizes['mm'][1], page_unit='mm')
        for unit, (w, h) in sizes.items():
            other = Settings(page_width=w, page_height=h, page_unit=unit)
            assert other.page_width_mm == pytest.approx(mm.page_width_mm, abs=1)
            assert other.page_height_mm == pytest.approx(mm.page_height_mm, abs=1)


def test_yaml_round_trip():
    settings = Settings(page_width=8.5, page_height=11, page_unit='in', grid_type='dots',
                        grid_spacing_x=5, grid_spacing_y=4, dot_size=0.8)
    text = settings_to_yaml(settings)
    assert text.startswith('page_width: 8.5\n')
    loaded = load_yaml(text)
    assert loaded == settings
    assert generate(loaded) == generate(settings)


def test_load_yaml_partial_and_empty():
    assert load_yaml('') == Settings()
    settings = load_yaml('page_unit: cm\npage_width: 21\npage_height: 29.7\nrectangle_width: abc\n')
    assert settings.page_unit == 'cm'
    assert settings.rectangle_width == 0.0
    assert settings.grid_spacing_x == 10


def test_describe_lines():
    assert describe(Settings()) == (
        'Grid Lines: 10mm × 10mm spacing • Line width: 0.2mm • Rectangle: 100mm × 80mm'
    )


def test_describe_dots():
    settings = Settings(grid_type='dots', grid_spacing_x=5, grid_spacing_y=2.5, dot_size=0.5)
    assert describe(settings) == (
        'Dots: 5mm × 2.5mm spacing • Dot size: 0.5mm • Rectangle: 100mm × 80mm'
    )


def test_main_writes_svg(tmp_path):
    config = tmp_path / 'grid.yml'
    config.write_text('grid_type: dots\ngrid_spacing_x: 20\n', encoding='utf-8')
    out = tmp_path / 'grid.svg'
    assert main([str(config), str(out)]) == 0
    assert out.read_text(encoding='utf-8') == generate(Settings(grid_type='dots', grid_spacing_x=20))


def test_main_defaults(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert main([]) == 0
    assert (tmp_path / 'grid-pattern.svg').read_text(encoding='utf-8') == generate(Settings())


@pytest.mark.parametrize('content', ['page_unit: pt\n', 'page_width: [1, 2\n'])
def test_main_rejects_bad_settings(tmp_path, content):
    config = tmp_path / 'grid.yml'
    config.write_text(content, encoding='utf-8')
    out = tmp_path / 'grid.svg'
    assert main([str(config), str(out)]) == 1
    assert not out.exists()


def test_main_missing_settings_file(tmp_path):
    assert main([str(tmp_path / 'missing.yml'), str(tmp_path / 'grid.svg')]) == 1
