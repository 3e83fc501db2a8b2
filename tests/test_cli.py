import json
import logging

import pytest

from mathmesh.__main__ import main, parse_param
from mathmesh.logging_config import setup_logging


class TestParseParam:
    def test_numbers(self):
        assert parse_param('size=2') == ('size', 2)
        assert parse_param('tube_radius=0.05') == ('tube_radius', 0.05)

    def test_bool_and_none(self):
        assert parse_param('show_base_sphere=false') == ('show_base_sphere', False)
        assert parse_param('depth=None') == ('depth', None)

    def test_string(self):
        assert parse_param("fiber_map='great_circle'") == ('fiber_map', 'great_circle')

    def test_tuple(self):
        assert parse_param('c=-0.8,0.156') == ('c', (-0.8, 0.156))

    def test_missing_equals(self):
        with pytest.raises(ValueError):
            parse_param('size')


def test_list(capsys):
    assert main(['--list']) == 0
    out = capsys.readouterr().out
    assert 'hopf_tubes' in out
    assert 'ncube10' in out


def test_summary(capsys):
    assert main(['klein_bottle', '--complexity', '8']) == 0
    out = capsys.readouterr().out
    assert 'TRIANGLES' in out
    assert '1024 vertices' in out


def test_bundle_summary(capsys):
    assert main(['hopf_ribbons', '-c', '3']) == 0
    out = capsys.readouterr().out
    assert '3 meshes' in out


def test_json(capsys):
    assert main(['julia_set', '-c', '20', '--param', 'c=-0.8,0.156',
                 '--param', 'resolution=12', '--json']) == 0
    data = json.loads(capsys.readouterr().out)
    assert data['topology'] == 'POINTS'
    assert data['primitives'] == data['vertices']


def test_json_bundle(capsys):
    assert main(['hopf_tubes', '-c', '2', '--json']) == 0
    data = json.loads(capsys.readouterr().out)
    assert len(data['meshes']) == 2
    assert data['skipped'] == 0


@pytest.mark.parametrize('argv', [
    ['klein_bottle', '--radius', '-1'],
    ['dodecahedron'],
    ['mandala', '--param', 'size=2'],
    ['ncube4', '--param', 'size'],
    [],
])
def test_invalid_input_exits_2(argv, capsys):
    assert main(argv) == 2
    assert 'Error' in capsys.readouterr().err


def test_setup_logging_replaces_handlers(tmp_path):
    log_file = tmp_path / 'mathmesh.log'
    logger = setup_logging(logging.DEBUG, str(log_file))
    assert len(logger.handlers) == 2
    logger = setup_logging(logging.INFO)
    assert len(logger.handlers) == 1
    assert logger.level == logging.INFO
    logger.handlers.clear()
