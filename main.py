# main.py
"""
The main entry point for launching the Last Game command-line tool.
"""
from last_game.cli import app


def main():
    """Runs the CLI application."""
    app()

if __name__ == "__main__":
    main()
