#!/usr/bin/env python3
# ABOUTME: Tests for the command-line interface.
# ABOUTME: Verifies argument parsing, preset commands and the translate command.

import json
import pytest
from unittest.mock import patch, MagicMock

from quadslator.cli import QuadslatorCLI
from quadslator.config import ModelConfig
from quadslator.errors import GenerationError
from quadslator.generation import ContextSuggestionClient, TranslationClient
from quadslator.presets import MemoryPresetStore
from quadslator.workflow import WorkflowController

USAGE = {"prompt_tokens": 10, "completion_tokens": 20, "total_tokens": 30}


@pytest.fixture
def presets_path(tmp_path, monkeypatch):
    path = tmp_path / "storage.json"
    monkeypatch.setenv("QUADSLATOR_PRESETS_PATH", str(path))
    return path


def test_parse_translate_arguments():
    """Test parsing of the translate command."""
    args = QuadslatorCLI.parse_arguments(["translate", "Hello", "-c", "formal", "-m", "gpt-4o"])
    assert args.command == "translate"
    assert args.prompt == "Hello"
    assert args.context == "formal"
    assert args.preset is None
    assert args.model == "gpt-4o"


def test_parse_context_and_preset_are_exclusive():
    """Test that --context and --preset cannot be combined."""
    with pytest.raises(SystemExit):
        QuadslatorCLI.parse_arguments(["translate", "Hello", "-c", "formal", "-p", "Formal"])


def test_parse_presets_arguments():
    """Test parsing of preset subcommands."""
    args = QuadslatorCLI.parse_arguments(["presets", "save", "Formal", "-c", "Business email tone"])
    assert args.command == "presets"
    assert args.preset_command == "save"
    assert args.name == "Formal"
    assert args.context == "Business email tone"


def test_presets_save_list_delete(presets_path):
    """Test preset management through the CLI."""
    save = QuadslatorCLI.parse_arguments(["presets", "save", "Formal", "-c", "Business email tone"])
    assert QuadslatorCLI.manage_presets(save) == 0

    data = json.loads(presets_path.read_text(encoding="utf-8"))
    assert data["quadslator_contexts"] == [{"name": "Formal", "value": "Business email tone"}]

    listing = QuadslatorCLI.parse_arguments(["presets", "list"])
    assert QuadslatorCLI.manage_presets(listing) == 0

    delete = QuadslatorCLI.parse_arguments(["presets", "delete", "Formal"])
    assert QuadslatorCLI.manage_presets(delete) == 0
    data = json.loads(presets_path.read_text(encoding="utf-8"))
    assert data["quadslator_contexts"] == []


def test_presets_save_empty_context_fails(presets_path):
    """Test that saving an empty context reports failure."""
    args = QuadslatorCLI.parse_arguments(["presets", "save", "Formal", "-c", ""])
    assert QuadslatorCLI.manage_presets(args) == 1
    assert not presets_path.exists()


@patch('quadslator.generation.ProviderFactory.create_provider')
def test_translate_command(mock_provider_factory, presets_path):
    """Test the translate command end to end with a stubbed provider."""
    mock_provider = MagicMock()
    mock_provider.generate.return_value = ('{"translations": ["A", "B", "C", "D"]}', USAGE, None)
    mock_provider_factory.return_value = mock_provider
    args = QuadslatorCLI.parse_arguments(["translate", "Good morning, how are you?", "-m", "gpt-4o-mini"])

    with patch.object(QuadslatorCLI, "setup_clients", return_value=(MagicMock(), None)):
        assert QuadslatorCLI.translate(args) == 0

    user_prompt = mock_provider.generate.call_args.args[1]
    assert user_prompt == "Prompt: Good morning, how are you?\nContext: general"


@patch('quadslator.generation.ProviderFactory.create_provider')
def test_translate_command_with_preset(mock_provider_factory, presets_path):
    """Test that --preset loads the saved context."""
    presets_path.write_text(
        json.dumps({"quadslator_contexts": [{"name": "Formal", "value": "Business email tone"}]}),
        encoding="utf-8",
    )
    mock_provider = MagicMock()
    mock_provider.generate.return_value = ('{"translations": ["A", "B", "C", "D"]}', USAGE, None)
    mock_provider_factory.return_value = mock_provider
    args = QuadslatorCLI.parse_arguments(["translate", "Hello", "-p", "Formal", "-m", "gpt-4o-mini"])

    with patch.object(QuadslatorCLI, "setup_clients", return_value=(MagicMock(), None)):
        assert QuadslatorCLI.translate(args) == 0

    assert mock_provider.generate.call_args.args[1].endswith("Context: Business email tone")


def test_translate_command_unknown_preset(presets_path):
    """Test that an unknown preset fails before any request."""
    args = QuadslatorCLI.parse_arguments(["translate", "Hello", "-p", "Missing", "-m", "gpt-4o-mini"])
    with patch.object(QuadslatorCLI, "setup_clients", return_value=(MagicMock(), None)):
        assert QuadslatorCLI.translate(args) == 1


@patch('quadslator.generation.ProviderFactory.create_provider')
def test_translate_command_malformed_output(mock_provider_factory, presets_path):
    """Test that malformed model output exits non-zero."""
    mock_provider = MagicMock()
    mock_provider.generate.return_value = ("not json", USAGE, None)
    mock_provider_factory.return_value = mock_provider
    args = QuadslatorCLI.parse_arguments(["translate", "Hello", "-m", "gpt-4o-mini"])

    with patch.object(QuadslatorCLI, "setup_clients", return_value=(MagicMock(), None)):
        assert QuadslatorCLI.translate(args) == 1


def test_setup_clients_exits_without_key(monkeypatch):
    """Test that a missing key for the model's provider exits."""
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    with patch("quadslator.cli.load_environment"):
        with pytest.raises(SystemExit):
            QuadslatorCLI.setup_clients("gpt-4o-mini")


def test_handle_command_presets_and_context():
    """Test interactive commands against a controller."""
    translation_client = MagicMock(spec=TranslationClient)
    suggester = MagicMock(spec=ContextSuggestionClient)
    controller = WorkflowController(translation_client, MemoryPresetStore())

    assert QuadslatorCLI.handle_command(controller, suggester, ":context Business email tone")
    assert controller.context == "Business email tone"
    assert QuadslatorCLI.handle_command(controller, suggester, ":save Formal")
    assert [p.name for p in controller.presets] == ["Formal"]
    assert QuadslatorCLI.handle_command(controller, suggester, ":context")
    assert controller.context == ""
    assert QuadslatorCLI.handle_command(controller, suggester, ":load Formal")
    assert controller.context == "Business email tone"
    assert QuadslatorCLI.handle_command(controller, suggester, ":delete Formal")
    assert controller.presets == []
    assert controller.notifications == []
    assert QuadslatorCLI.handle_command(controller, suggester, ":quit") is False


def test_handle_command_suggest():
    """Test that :suggest uses the last prompt."""
    suggester = MagicMock(spec=ContextSuggestionClient)
    suggester.suggest_contexts.return_value = ["formal email"]
    controller = WorkflowController(MagicMock(spec=TranslationClient), MemoryPresetStore())
    controller.prompt = "Good morning"

    assert QuadslatorCLI.handle_command(controller, suggester, ":suggest")
    suggester.suggest_contexts.assert_called_once_with("Good morning")


def test_show_suggestions_error():
    """Test that suggestion failures are reported, not raised."""
    suggester = MagicMock(spec=ContextSuggestionClient)
    suggester.suggest_contexts.side_effect = GenerationError("boom")
    assert QuadslatorCLI._show_suggestions(suggester, "Hello") == 1
    assert QuadslatorCLI._show_suggestions(suggester, "") == 1


def test_run_list_models():
    """Test that --list-models exits cleanly."""
    with pytest.raises(SystemExit) as excinfo:
        QuadslatorCLI.run(["--list-models"])
    assert excinfo.value.code == 0


def test_display_model_info_groups_by_provider():
    """Test that the model table lists OpenAI models before Anthropic ones."""
    with patch("quadslator.cli.console") as mock_console:
        QuadslatorCLI.display_model_info()

    table = mock_console.print.call_args.args[0]
    models = list(table.columns[0].cells)
    providers = list(table.columns[1].cells)
    assert models == (
        ModelConfig.get_models_by_provider("openai") +
        ModelConfig.get_models_by_provider("anthropic")
    )
    assert providers.index("Anthropic") == len(ModelConfig.get_models_by_provider("openai"))
