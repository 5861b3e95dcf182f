"""Unit tests for the narrator CLI."""

import sys
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from narrator.cli import main as cli
from narrator.lib.config import reset_all_configs
from narrator.lib.exceptions import CatalogError, CredentialError, ErrorKind, PollError
from narrator.models import AudioResult


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("CAMB_API_KEY", raising=False)
    reset_all_configs()
    yield
    reset_all_configs()


class TestParser:
    """Argument parsing."""

    def test_say_arguments(self):
        args = cli.create_parser().parse_args(
            ["--api-key", "k", "say", "Hello", "--voice-id", "7", "--gender", "2", "-o", "x.wav"]
        )

        assert args.api_key == "k"
        assert args.command == "say"
        assert args.text == "Hello"
        assert args.voice_id == 7
        assert args.gender == 2
        assert args.language is None
        assert args.output == "x.wav"

    def test_voices_command(self):
        args = cli.create_parser().parse_args(["-v", "voices"])

        assert args.command == "voices"
        assert args.verbose is True

    def test_non_integer_voice_id_is_usage_error(self):
        with pytest.raises(SystemExit):
            cli.create_parser().parse_args(["say", "Hi", "--voice-id", "abc"])


class TestMain:
    """Exit codes."""

    def test_no_command_is_usage_error(self, monkeypatch):
        monkeypatch.setattr(sys, "argv", ["narrator"])

        assert cli.main() == cli.EXIT_USAGE_ERROR

    def test_missing_api_key_is_config_error(self, monkeypatch, tmp_path, capsys):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr(sys, "argv", ["narrator", "voices"])

        assert cli.main() == cli.EXIT_CONFIG_ERROR
        assert "CAMB_API_KEY" in capsys.readouterr().err


def scripted_session(initialized=True, last_error=None, audio=None):
    session = AsyncMock()
    session.__aenter__.return_value = session
    session.initialize.return_value = initialized
    session.last_error = last_error
    session.synthesize.return_value = audio
    session.release_result = MagicMock()
    return session


class TestRun:
    """Command dispatch with a scripted session."""

    @pytest.fixture(autouse=True)
    def api_key(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("CAMB_API_KEY", "key")

    def test_rejected_key_is_credential_error(self, monkeypatch):
        monkeypatch.setattr(sys, "argv", ["narrator", "voices"])
        session = scripted_session(
            initialized=False,
            last_error=CredentialError("nope", kind=ErrorKind.AUTH_REJECTED),
        )

        with patch.object(cli, "NarratorSession", return_value=session):
            assert cli.main() == cli.EXIT_CREDENTIAL_ERROR

    def test_empty_catalog_is_provider_error(self, monkeypatch):
        monkeypatch.setattr(sys, "argv", ["narrator", "voices"])
        session = scripted_session(
            initialized=False,
            last_error=CatalogError("none", kind=ErrorKind.NO_VOICES_AVAILABLE),
        )

        with patch.object(cli, "NarratorSession", return_value=session):
            assert cli.main() == cli.EXIT_PROVIDER_ERROR

    def test_say_writes_inline_audio(self, monkeypatch, tmp_path):
        output = tmp_path / "out.wav"
        monkeypatch.setattr(sys, "argv", ["narrator", "say", "Hello", "-o", str(output)])
        audio = AudioResult.from_bytes(b"RIFF")
        session = scripted_session(audio=audio)

        with patch.object(cli, "NarratorSession", return_value=session):
            assert cli.main() == cli.EXIT_SUCCESS

        assert output.read_bytes() == b"RIFF"
        session.release_result.assert_called_once_with(audio)
        session.initialize.assert_awaited_once_with("key", None)

    def test_say_failure_is_provider_error(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["narrator", "say", "Hello"])
        session = scripted_session()
        session.synthesize.side_effect = PollError("slow", kind=ErrorKind.POLL_TIMEOUT)

        with patch.object(cli, "NarratorSession", return_value=session):
            assert cli.main() == cli.EXIT_PROVIDER_ERROR

        assert "Error:" in capsys.readouterr().err

    def test_say_passes_voice_id_to_synthesize(self, monkeypatch, tmp_path):
        output = tmp_path / "out.wav"
        monkeypatch.setattr(
            sys, "argv", ["narrator", "say", "Hello", "--voice-id", "7", "-o", str(output)]
        )
        session = scripted_session(audio=AudioResult.from_bytes(b"RIFF"))

        with patch.object(cli, "NarratorSession", return_value=session):
            assert cli.main() == cli.EXIT_SUCCESS

        session.initialize.assert_awaited_once_with("key", 7)
        session.synthesize.assert_awaited_once_with(
            "Hello", language=None, gender=None, voice_id=7
        )
