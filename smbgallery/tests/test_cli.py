"""Tests for CLI module."""

import logging
from unittest.mock import patch

import pytest

from smbgallery.cli import cmd_scan, cmd_serve, cmd_warm, create_parser, get_smb_config, main
from smbgallery.errors import RemoteUnavailable


@pytest.fixture
def smb_env(monkeypatch):
    monkeypatch.setenv('SMB_SERVER_IP', 'nas.local')
    monkeypatch.setenv('SMB_SHARE_NAME', 'media')
    monkeypatch.setenv('SMB_DIRECTORY_PATH', '/photos')
    monkeypatch.delenv('SMB_USERNAME', raising=False)
    monkeypatch.delenv('SMB_PASSWORD', raising=False)


class TestCreateParser:
    """Tests for argument parser creation."""

    def test_scan_command(self):
        args = create_parser().parse_args(['scan', '--show-files', '--root', '/2019'])

        assert args.command == 'scan'
        assert args.show_files is True
        assert args.root == '/2019'

    def test_warm_command(self):
        args = create_parser().parse_args([
            'warm', '--cadence', '0.5', '--limit', '3', '--height', '200', '-n'
        ])

        assert args.command == 'warm'
        assert args.cadence == 0.5
        assert args.limit == 3
        assert args.height == 200
        assert args.dry_run is True

    def test_serve_command(self):
        args = create_parser().parse_args(['serve'])

        assert args.command == 'serve'

    def test_serve_accepts_smb_overrides(self):
        args = create_parser().parse_args(['serve', '-v', '--smb-server', 'nas', '--root', '/2019'])

        assert args.smb_server == 'nas'
        assert args.root == '/2019'
        assert args.verbose is True


class TestConfig:
    """Tests for CLI configuration overrides."""

    def test_overrides(self, smb_env):
        args = create_parser().parse_args([
            'scan', '--smb-server', 'other', '--smb-username', 'bob', '--smb-password', 'pw'
        ])

        config = get_smb_config(args)

        assert config.server == 'other'
        assert config.share == 'media'
        assert config.username == 'bob'
        assert config.root == '/photos'


class TestMain:
    """Tests for main entry point."""

    def test_no_command(self):
        assert main([]) == 1


class TestCmdScan:
    """Tests for scan command."""

    def test_invalid_config(self, monkeypatch):
        monkeypatch.delenv('SMB_SERVER_IP', raising=False)
        monkeypatch.delenv('SMB_SHARE_NAME', raising=False)
        args = create_parser().parse_args(['scan'])

        assert cmd_scan(args) == 1

    def test_scan_lists_images(self, smb_env, photo_store, capsys):
        photo_store.connect = lambda: None
        args = create_parser().parse_args(['scan', '--show-files'])

        with patch('smbgallery.cli.SMBClient', return_value=photo_store):
            result = cmd_scan(args)

        assert result == 0
        out = capsys.readouterr().out
        assert 'x.jpg' in out
        assert 'y.png' in out
        assert 'Images: 2' in out
        assert 'photos\\sub' not in out

    def test_scan_unreachable(self, smb_env, photo_store):
        def fail():
            raise RemoteUnavailable("connection refused")

        photo_store.connect = fail
        args = create_parser().parse_args(['scan'])

        with patch('smbgallery.cli.SMBClient', return_value=photo_store):
            assert cmd_scan(args) == 1


class TestCmdWarm:
    """Tests for warm command."""

    def test_warm(self, smb_env, photo_store, cache_dir, capsys):
        photo_store.connect = lambda: None
        args = create_parser().parse_args(['warm', '--cache-dir', cache_dir, '--height', '20'])

        with patch('smbgallery.gallery.SMBClient', return_value=photo_store):
            result = cmd_warm(args)

        assert result == 0
        assert 'Generated: 2' in capsys.readouterr().out

    def test_warm_reports_errors(self, smb_env, photo_store, cache_dir):
        photo_store.connect = lambda: None
        photo_store.failing_reads.add('photos\\x.jpg')
        args = create_parser().parse_args(['warm', '--cache-dir', cache_dir, '-q'])

        with patch('smbgallery.gallery.SMBClient', return_value=photo_store):
            assert cmd_warm(args) == 1

    def test_warm_unreachable(self, smb_env, photo_store, cache_dir, capsys):
        def fail():
            raise RemoteUnavailable("connection refused")

        photo_store.connect = fail
        args = create_parser().parse_args(['warm', '--cache-dir', cache_dir])

        with patch('smbgallery.gallery.SMBClient', return_value=photo_store):
            assert cmd_warm(args) == 1

        assert 'Generated:' not in capsys.readouterr().out
        assert photo_store.reads == []

    def test_warm_unreadable_root(self, smb_env, photo_store, cache_dir):
        photo_store.connect = lambda: None
        photo_store.unreadable.add('photos')
        args = create_parser().parse_args(['warm', '--cache-dir', cache_dir, '-q'])

        with patch('smbgallery.gallery.SMBClient', return_value=photo_store):
            assert cmd_warm(args) == 1


class TestCmdServe:
    """Tests for serve command."""

    def test_passes_overridden_config(self, smb_env, mocker):
        server_main = mocker.patch('server.main', return_value=0)
        args = create_parser().parse_args(['serve', '--smb-server', 'other', '--root', '/2019'])

        assert cmd_serve(args) == 0

        config = server_main.call_args.args[0]
        assert config.server == 'other'
        assert config.share == 'media'
        assert config.root == '/2019'

    def test_invalid_config(self, monkeypatch, mocker):
        monkeypatch.delenv('SMB_SERVER_IP', raising=False)
        monkeypatch.delenv('SMB_SHARE_NAME', raising=False)
        server_main = mocker.patch('server.main')
        args = create_parser().parse_args(['serve'])

        assert cmd_serve(args) == 1
        server_main.assert_not_called()

    def test_verbose(self, smb_env, mocker):
        mocker.patch('server.main', return_value=0)
        root = logging.getLogger()
        level = root.level
        args = create_parser().parse_args(['serve', '-v'])

        try:
            cmd_serve(args)
            assert root.level == logging.DEBUG
        finally:
            root.setLevel(level)
