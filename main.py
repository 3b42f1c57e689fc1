#!/usr/bin/env python3
# ABOUTME: Command-line entry point for Quadslator.
# ABOUTME: Produces four alternative translations of a prompt using an LLM.

from quadslator.cli import QuadslatorCLI


def main() -> None:
    """Main entry point for the Quadslator CLI."""
    QuadslatorCLI.run()


if __name__ == "__main__":
    main()
