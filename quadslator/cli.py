#!/usr/bin/env python3
# ABOUTME: Command-line interface for Quadslator.
# ABOUTME: Handles user interaction, arguments, and displays results.

import argparse
import os
import sys
from typing import Dict, List, Optional, Tuple

import openai
import anthropic
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from quadslator.config import (
    CONFIG_DIR_NAME,
    DEFAULT_MODEL,
    ModelConfig,
    get_config_paths,
    get_default_model,
    get_presets_path,
    load_environment,
    setup_logging,
)
from quadslator.cost import CostEstimator
from quadslator.errors import GenerationError
from quadslator.generation import ContextSuggestionClient, TranslationClient, create_clients
from quadslator.models import SavedContext
from quadslator.presets import JsonFilePresetStore
from quadslator.providers import strip_provider_prefix
from quadslator.workflow import Notification, RequestState, WorkflowController

console = Console()

NOTIFICATION_STYLES = {
    "info": "bold cyan",
    "success": "bold green",
    "warning": "bold yellow",
    "error": "bold red",
}

INTERACTIVE_HELP = """\
Type text and press Enter to get four translations.
  :context TEXT   set the context (empty to clear)
  :presets        list saved contexts
  :load NAME      load a saved context
  :save NAME      save the current context
  :delete NAME    delete a saved context
  :suggest        suggest contexts for the last prompt
  :help           show this help
  :quit           exit"""


class QuadslatorCLI:
    """Command-line interface for Quadslator."""

    @staticmethod
    def _provider_for(model: str) -> str:
        if ":" in model:
            return model.split(":", 1)[0].lower()
        return ModelConfig.get_provider(model)

    @classmethod
    def setup_clients(cls, model: str) -> Tuple[Optional[openai.OpenAI], Optional[anthropic.Anthropic]]:
        """Set up API clients for whichever keys are configured.

        Looks for API keys in the following locations (in order of precedence):
        1. Environment variables
        2. .env file in the current working directory
        3. .env file in ~/.quadslator/ directory
        4. .env file in ~/.config/quadslator/ directory

        Exits if the key for the model's provider is missing.
        """
        load_environment()

        openai_key = os.getenv("OPENAI_API_KEY")
        anthropic_key = os.getenv("ANTHROPIC_API_KEY")
        openai_client = openai.OpenAI(api_key=openai_key) if openai_key else None
        anthropic_client = anthropic.Anthropic(api_key=anthropic_key) if anthropic_key else None

        provider = cls._provider_for(model)
        required = {"openai": ("OPENAI_API_KEY", openai_client), "anthropic": ("ANTHROPIC_API_KEY", anthropic_client)}
        if provider in required and required[provider][1] is None:
            key_name = required[provider][0]
            console.print(
                f"[bold red]Error:[/] {key_name} not found in environment variables or .env files."
            )
            console.print("Please set your API key in one of the following locations:")
            console.print(f"1. Environment variable: export {key_name}=your_api_key")
            console.print("2. Current directory .env file")
            console.print(f"3. ~/{CONFIG_DIR_NAME}/.env file")
            console.print("4. ~/.config/quadslator/.env file")
            console.print("Run [bold]quadslator config[/] to create one.")
            sys.exit(1)

        return openai_client, anthropic_client

    @staticmethod
    def display_model_info() -> None:
        """Display information about available models and their costs."""
        table = Table(title="Available Models (with pricing)")
        table.add_column("Model", style="cyan")
        table.add_column("Provider", style="blue")
        table.add_column("Max Tokens", style="green")
        table.add_column("Input Cost (per 1K tokens)", style="yellow")
        table.add_column("Output Cost (per 1K tokens)", style="yellow")

        for provider in ("openai", "anthropic"):
            for model in ModelConfig.get_models_by_provider(provider):
                config = ModelConfig.MODELS[model]
                table.add_row(
                    model,
                    provider.title(),
                    f"{config['max_tokens']:,}",
                    f"${config['input_cost']:.4f}",
                    f"${config['output_cost']:.4f}",
                )

        console.print(table)

    @staticmethod
    def display_notifications(notifications: List[Notification]) -> None:
        for notification in notifications:
            style = NOTIFICATION_STYLES.get(notification.level, "bold")
            console.print(
                f"[{style}]{escape(notification.title)}:[/] {escape(notification.message)}"
            )

    @staticmethod
    def display_translations(translations: List[str]) -> None:
        """Display each translation in its own numbered panel."""
        for i, translation in enumerate(translations, start=1):
            console.print(
                Panel(
                    escape(translation),
                    title=f"[bold cyan]Translation {i}[/]",
                    border_style="blue",
                    padding=(1, 2),
                )
            )

    @staticmethod
    def display_usage(usage: Dict[str, int], model: str) -> None:
        """Display token usage and cost for the last request."""
        usage_table = Table(title="Token Usage")
        usage_table.add_column("Input Tokens", style="green", justify="right")
        usage_table.add_column("Output Tokens", style="green", justify="right")
        usage_table.add_column("Total Tokens", style="green", justify="right")
        usage_table.add_column("Cost", style="yellow", justify="right")

        _, cost_str = CostEstimator.calculate_actual_cost(usage, model)
        usage_table.add_row(
            f"{usage.get('prompt_tokens', 0):,}",
            f"{usage.get('completion_tokens', 0):,}",
            f"{usage.get('total_tokens', 0):,}",
            cost_str,
        )
        console.print(usage_table)

    @staticmethod
    def display_presets(presets: List[SavedContext]) -> None:
        if not presets:
            console.print("[dim]No saved contexts.[/dim]")
            return

        table = Table(title="Saved Contexts")
        table.add_column("Name", style="cyan")
        table.add_column("Context", style="white")
        for preset in presets:
            table.add_row(escape(preset.name), escape(preset.value))
        console.print(table)

    @classmethod
    def create_config_dialog(cls) -> None:
        """Interactive dialog to create and configure the .env file."""
        console.print("[bold]Quadslator Configuration Setup[/]")

        config_paths = get_config_paths()
        console.print("\n[bold]Select configuration location:[/]")
        for i, path in enumerate(config_paths):
            status = "[green]exists[/]" if os.path.exists(path) else "[dim]does not exist[/]"
            console.print(f"{i+1}. {path} {status}")

        while True:
            choice = input(f"\nEnter number of preferred location (or press Enter for default ~/{CONFIG_DIR_NAME}/.env): ")
            if not choice:
                choice = 2
                break
            try:
                choice = int(choice)
                if 1 <= choice <= len(config_paths):
                    break
                console.print(f"[red]Please enter a number between 1 and {len(config_paths)}[/]")
            except ValueError:
                console.print("[red]Please enter a valid number[/]")

        selected_path = config_paths[choice - 1]
        config_dir = os.path.dirname(selected_path)
        try:
            os.makedirs(config_dir, exist_ok=True)
        except OSError as e:
            console.print(f"[bold red]Error creating directory:[/] {escape(str(e))}")
            return

        config = {}
        console.print("\n[bold]OpenAI API Key[/] (press Enter to skip)")
        openai_key = input("Enter your OpenAI API key: ").strip()
        if openai_key:
            config["OPENAI_API_KEY"] = openai_key

        console.print("\n[bold]Anthropic API Key[/] (press Enter to skip)")
        anthropic_key = input("Enter your Anthropic API key: ").strip()
        if anthropic_key:
            config["ANTHROPIC_API_KEY"] = anthropic_key

        if not config:
            console.print("[bold red]Error:[/] At least one API key is required.")
            return

        console.print(f"\n[bold]Default Model (optional, default: {DEFAULT_MODEL})[/]")
        console.print("Available models: " + ", ".join(ModelConfig.MODELS.keys()))
        default_model = input(f"Enter your preferred default model (or press Enter for {DEFAULT_MODEL}): ").strip()
        if default_model:
            if default_model in ModelConfig.MODELS:
                config["QUADSLATOR_MODEL"] = default_model
            else:
                console.print(f"[yellow]Warning:[/] Unknown model '{escape(default_model)}'. Using {DEFAULT_MODEL}.")

        try:
            with open(selected_path, "w", encoding="utf-8") as f:
                for key, value in config.items():
                    f.write(f"{key}={value}\n")
                if "QUADSLATOR_MODEL" not in config:
                    f.write(f"\n# Default model (uncomment to change)\n# QUADSLATOR_MODEL={DEFAULT_MODEL}\n")
                f.write(f"\n# Saved contexts file (defaults to ~/{CONFIG_DIR_NAME}/storage.json)\n# QUADSLATOR_PRESETS_PATH=/path/to/storage.json\n")
                f.write("\n# Log level (defaults to WARNING)\n# LOG_LEVEL=WARNING  # Options: DEBUG, INFO, WARNING, ERROR, CRITICAL\n")

            console.print(f"[bold green]Configuration saved to:[/] {selected_path}")
        except OSError as e:
            console.print(f"[bold red]Error saving configuration:[/] {escape(str(e))}")

    @classmethod
    def parse_arguments(cls, argv: Optional[List[str]] = None) -> argparse.Namespace:
        """Parse command-line arguments.

        Returns:
            Parsed arguments
        """
        parser = argparse.ArgumentParser(
            description="Get four unique AI-powered translations for any prompt."
        )
        parser.add_argument(
            "--list-models",
            action="store_true",
            help="Display available models and pricing",
        )
        parser.add_argument(
            "--log-level",
            help="Logging level (default: LOG_LEVEL or WARNING)",
        )
        subparsers = parser.add_subparsers(dest="command")

        translate = subparsers.add_parser("translate", help="Translate a prompt four ways")
        translate.add_argument("prompt", help="Text to translate")
        source = translate.add_mutually_exclusive_group()
        source.add_argument("-c", "--context", default="", help="Context for the translation")
        source.add_argument("-p", "--preset", help="Name of a saved context to use")
        translate.add_argument("-m", "--model", help=f"AI model to use (default: {DEFAULT_MODEL})")

        suggest = subparsers.add_parser("suggest", help="Suggest contexts for a prompt")
        suggest.add_argument("prompt", help="Text you want to translate")
        suggest.add_argument("-m", "--model", help=f"AI model to use (default: {DEFAULT_MODEL})")

        presets = subparsers.add_parser("presets", help="Manage saved contexts")
        preset_commands = presets.add_subparsers(dest="preset_command", required=True)
        preset_commands.add_parser("list", help="List saved contexts")
        save = preset_commands.add_parser("save", help="Save a context under a name")
        save.add_argument("name", help="Preset name")
        save.add_argument("-c", "--context", required=True, help="Context text to save")
        delete = preset_commands.add_parser("delete", help="Delete every context with this name")
        delete.add_argument("name", help="Preset name")

        interactive = subparsers.add_parser("interactive", help="Start an interactive session")
        interactive.add_argument("-m", "--model", help=f"AI model to use (default: {DEFAULT_MODEL})")

        subparsers.add_parser("config", help="Configure API keys and defaults")

        return parser.parse_args(argv)

    @classmethod
    def build_controller(cls, model: str, with_clients: bool = True) -> WorkflowController:
        """Create a workflow controller backed by the configured preset file."""
        openai_client, anthropic_client = (None, None)
        if with_clients:
            openai_client, anthropic_client = cls.setup_clients(model)
        translation_client = TranslationClient(
            model, openai_client=openai_client, anthropic_client=anthropic_client
        )
        store = JsonFilePresetStore(get_presets_path())
        return WorkflowController(translation_client, store)

    @classmethod
    def _submit(cls, controller: WorkflowController) -> RequestState:
        with Progress(
            SpinnerColumn(),
            TextColumn("[bold green]Translating...[/]"),
            transient=True,
            console=console,
        ) as progress:
            progress.add_task("translating", total=None)
            state = controller.submit()

        for field, message in controller.field_errors.items():
            console.print(f"[bold red]{field.title()}:[/] {escape(message)}")
        cls.display_notifications(controller.drain_notifications())

        if state == RequestState.SUCCEEDED:
            cls.display_translations(controller.results)
            client = controller.translation_client
            cls.display_usage(client.last_usage, client.model)
        return state

    @classmethod
    def translate(cls, args: argparse.Namespace) -> int:
        model = args.model or get_default_model()
        controller = cls.build_controller(model)
        cls.display_notifications(controller.drain_notifications())

        controller.prompt = args.prompt
        controller.context = args.context
        if args.preset and not controller.select_preset(args.preset):
            console.print(f"[bold red]Error:[/] No saved context named '{escape(args.preset)}'.")
            return 1

        console.print(f"[bold]Using model:[/] {escape(model)}")
        state = cls._submit(controller)
        return 0 if state == RequestState.SUCCEEDED else 1

    @classmethod
    def suggest(cls, args: argparse.Namespace) -> int:
        model = args.model or get_default_model()
        openai_client, anthropic_client = cls.setup_clients(model)
        client = ContextSuggestionClient(
            model, openai_client=openai_client, anthropic_client=anthropic_client
        )
        return cls._show_suggestions(client, args.prompt)

    @classmethod
    def _show_suggestions(cls, client: ContextSuggestionClient, prompt: str) -> int:
        if not prompt.strip():
            console.print("[bold red]Prompt:[/] Prompt cannot be empty.")
            return 1
        try:
            with console.status("[bold green]Thinking of contexts...[/]"):
                suggestions = client.suggest_contexts(prompt)
        except GenerationError as e:
            console.print(f"[bold red]Suggestion Error:[/] {escape(str(e))}")
            return 1

        console.print("[bold]Suggested contexts:[/]")
        for i, suggestion in enumerate(suggestions, start=1):
            console.print(f"  {i}. {escape(suggestion)}")
        return 0

    @classmethod
    def manage_presets(cls, args: argparse.Namespace) -> int:
        controller = cls.build_controller(get_default_model(), with_clients=False)
        cls.display_notifications(controller.drain_notifications())

        ok = True
        if args.preset_command == "list":
            cls.display_presets(controller.presets)
        elif args.preset_command == "save":
            controller.context = args.context
            ok = controller.save_preset(args.name)
        elif args.preset_command == "delete":
            ok = controller.delete_preset(args.name)

        cls.display_notifications(controller.drain_notifications())
        return 0 if ok else 1

    @classmethod
    def handle_command(cls, controller: WorkflowController, suggester: ContextSuggestionClient, line: str) -> bool:
        """Apply one interactive command. Returns False when the session should end."""
        command, _, argument = line[1:].partition(" ")
        argument = argument.strip()

        if command in ("quit", "exit", "q"):
            return False
        if command == "help":
            console.print(INTERACTIVE_HELP)
        elif command == "context":
            controller.context = argument
            console.print(f"[bold]Context:[/] {escape(argument) or '[dim]general[/dim]'}")
        elif command == "presets":
            cls.display_presets(controller.presets)
        elif command == "load":
            if controller.select_preset(argument):
                console.print(f"[bold]Context:[/] {escape(controller.context)}")
            else:
                console.print(f"[bold red]Error:[/] No saved context named '{escape(argument)}'.")
        elif command == "save":
            controller.save_preset(argument)
        elif command == "delete":
            controller.delete_preset(argument)
        elif command == "suggest":
            cls._show_suggestions(suggester, controller.prompt)
        else:
            console.print(f"[yellow]Unknown command:[/] {escape(command)}. Type :help for commands.")

        cls.display_notifications(controller.drain_notifications())
        return True

    @classmethod
    def interactive(cls, args: argparse.Namespace) -> int:
        model = args.model or get_default_model()
        openai_client, anthropic_client = cls.setup_clients(model)
        translation_client, suggester = create_clients(
            model, openai_client=openai_client, anthropic_client=anthropic_client
        )
        controller = WorkflowController(translation_client, JsonFilePresetStore(get_presets_path()))

        console.print("[bold cyan]Quadslator[/] - four unique translations for any prompt.")
        console.print(f"[bold]Using model:[/] {escape(strip_provider_prefix(model))}")
        console.print(INTERACTIVE_HELP)
        cls.display_notifications(controller.drain_notifications())

        while True:
            try:
                line = input("\n> ").strip()
            except (EOFError, KeyboardInterrupt):
                console.print()
                break

            if not line:
                continue
            if line.startswith(":"):
                if not cls.handle_command(controller, suggester, line):
                    break
                continue

            controller.prompt = line
            cls._submit(controller)

        return 0

    @classmethod
    def run(cls, argv: Optional[List[str]] = None) -> None:
        """Run the Quadslator command-line interface."""
        args = cls.parse_arguments(argv)
        load_environment()
        setup_logging(console, args.log_level)

        if args.list_models:
            cls.display_model_info()
            sys.exit(0)

        if args.command == "config":
            cls.create_config_dialog()
            return

        handlers = {
            "translate": cls.translate,
            "suggest": cls.suggest,
            "presets": cls.manage_presets,
            "interactive": cls.interactive,
        }
        handler = handlers.get(args.command or "interactive")
        if args.command is None:
            args.model = None
        sys.exit(handler(args))
