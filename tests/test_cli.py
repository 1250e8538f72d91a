"""
Tests for the command-line interface.
"""

import json
from pathlib import Path

import pytest

from imgprint.cli import create_parser, main
from imgprint.config import HASH_MASK
from imgprint.user_config import get_user_config


@pytest.fixture(autouse=True)
def isolated_config(temp_dir, monkeypatch):
    """Point the user configuration at an empty directory."""
    config_dir = temp_dir / "config"
    monkeypatch.setenv('IMGPRINT_CONFIG_DIR', str(config_dir))
    for name in ('IMGPRINT_STORE_FILE', 'IMGPRINT_RESULTS', 'IMGPRINT_THRESHOLD',
                 'IMGPRINT_BLUR_SIGMA', 'IMGPRINT_WINDOW_SIZE', 'IMGPRINT_MAX_CORNERS',
                 'IMGPRINT_CORNER_THRESHOLD'):
        monkeypatch.delenv(name, raising=False)
    get_user_config().reload()
    yield config_dir
    get_user_config().reload()


@pytest.fixture
def image_dir(temp_dir, sample_images):
    """Directory holding only valid sample images."""
    Path(sample_images['corrupted']).unlink()
    return temp_dir


class TestArgumentParsing:
    def test_search_defaults(self):
        args = create_parser().parse_args(['search', 'query.png'])
        assert args.results == 5
        assert not args.rotations
        assert not args.mirror

    def test_corner_options(self):
        args = create_parser().parse_args(['corners', 'a.png', '-w', '7', '-m', '10', '-t', '0'])
        assert args.window == 7
        assert args.max_corners == 10
        assert args.threshold == 0.0
        assert args.method == 'harris'

    def test_env_overrides_defaults(self, monkeypatch):
        monkeypatch.setenv('IMGPRINT_RESULTS', '12')
        args = create_parser().parse_args(['search', 'query.png'])
        assert args.results == 12

    def test_lsh_flags_exclusive(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(['groups', '--lsh', '--no-lsh'])


class TestHashCommand:
    def test_prints_fingerprint(self, sample_images, capsys):
        assert main(['hash', sample_images['gradient']]) == 0
        line = capsys.readouterr().out.strip()
        assert line.split('\t') == [str(HASH_MASK), 'ffffffffffffffff']

    def test_rotations(self, sample_images, capsys):
        assert main(['hash', sample_images['textured'], '--rotations']) == 0
        assert len(capsys.readouterr().out.strip().splitlines()) == 4

    def test_missing_file(self, temp_dir):
        assert main(['hash', str(temp_dir / 'missing.png')]) == 1

    def test_corrupted_file(self, sample_images):
        assert main(['hash', sample_images['corrupted']]) == 1


class TestStoreCommands:
    def test_hash_dir_then_search(self, image_dir, sample_images, temp_dir, capsys):
        store_path = temp_dir / "store.json"
        assert main(['hash-dir', str(image_dir), '--store', str(store_path), '--no-progress']) == 0

        data = json.loads(store_path.read_text(encoding='utf-8'))
        assert len(data) == 3

        capsys.readouterr()
        assert main(['search', sample_images['gradient'], '--store', str(store_path), '-k', '1']) == 0
        out = capsys.readouterr().out
        assert "SIMILAR IMAGES (1)" in out
        assert str(Path(sample_images['gradient']).resolve()) in out
        assert "[ 0 bits]" in out

    def test_hash_dir_appends(self, image_dir, temp_dir):
        store_path = temp_dir / "store.json"
        argv = ['hash-dir', str(image_dir), '--store', str(store_path), '--no-progress']
        assert main(argv) == 0
        assert main(argv) == 0
        assert len(json.loads(store_path.read_text(encoding='utf-8'))) == 6

    def test_hash_dir_skips_bad_files(self, sample_images, temp_dir):
        store_path = temp_dir / "store.json"
        assert main(['hash-dir', str(temp_dir), '--store', str(store_path), '--no-progress']) == 0
        assert len(json.loads(store_path.read_text(encoding='utf-8'))) == 3

    def test_hash_dir_missing_directory(self, temp_dir):
        assert main(['hash-dir', str(temp_dir / 'nope'), '--store', str(temp_dir / 's.json')]) == 1

    def test_search_without_store(self, sample_images, temp_dir):
        store_path = temp_dir / "missing.json"
        assert main(['search', sample_images['gradient'], '--store', str(store_path)]) == 1
        assert not store_path.exists()

    def test_search_malformed_store(self, sample_images, temp_dir):
        store_path = temp_dir / "store.json"
        store_path.write_text('{"not": "a list"}', encoding='utf-8')
        assert main(['search', sample_images['gradient'], '--store', str(store_path)]) == 1

    def test_search_invalid_count(self, sample_images, temp_dir):
        assert main(['search', sample_images['gradient'], '--store', str(temp_dir / 's.json'),
                     '-k', '0']) == 1

    def test_groups(self, image_dir, temp_dir, gradient_image, capsys):
        gradient_image.save(image_dir / "gradient_copy.png")
        store_path = temp_dir / "store.json"
        assert main(['hash-dir', str(image_dir), '--store', str(store_path), '--no-progress']) == 0

        capsys.readouterr()
        assert main(['groups', '--store', str(store_path), '-t', '0']) == 0
        out = capsys.readouterr().out
        assert "SIMILAR GROUPS (1)" in out
        assert "gradient_copy.png" in out

    def test_groups_invalid_threshold(self, temp_dir):
        assert main(['groups', '--store', str(temp_dir / 's.json'), '-t', '65']) == 1


class TestCornersCommand:
    def test_detects_and_marks(self, sample_images, temp_dir, capsys):
        output = temp_dir / "marked.png"
        argv = ['corners', sample_images['square'], '--blur', '0', '-w', '5', '-t', '0',
                '-o', str(output)]
        assert main(argv) == 0
        assert output.exists()
        assert "CORNERS (" in capsys.readouterr().out

    def test_even_window(self, sample_images):
        assert main(['corners', sample_images['square'], '-w', '4']) == 1

    def test_negative_max(self, sample_images):
        assert main(['corners', sample_images['square'], '-m', '-1']) == 1

    def test_window_larger_than_image(self, sample_images):
        assert main(['corners', sample_images['square'], '-w', '41']) == 1

    def test_shi_tomasi(self, sample_images):
        assert main(['corners', sample_images['square'], '--method', 'shi-tomasi', '-t', '0']) == 0


class TestConfigCommand:
    def test_show_defaults(self, isolated_config, capsys):
        assert main(['config']) == 0
        out = capsys.readouterr().out
        assert str(isolated_config / 'config.json') in out
        assert "Not found" in out
        assert "window_size: 5" in out

    def test_init_creates_file(self, isolated_config):
        assert main(['config', '--init']) == 0
        data = json.loads((isolated_config / 'config.json').read_text(encoding='utf-8'))
        assert data['search_results'] == 5
        assert data['window_size'] == 5

    def test_file_values_used(self, isolated_config):
        isolated_config.mkdir()
        (isolated_config / 'config.json').write_text('{"search_results": 9}', encoding='utf-8')
        get_user_config().reload()
        assert create_parser().parse_args(['search', 'q.png']).results == 9

    def test_invalid_env_value_falls_back(self, monkeypatch):
        monkeypatch.setenv('IMGPRINT_WINDOW_SIZE', 'wide')
        monkeypatch.setenv('IMGPRINT_BLUR_SIGMA', '0.5')
        config = get_user_config()
        assert config.window_size == 5
        assert config.blur_sigma == 0.5
