"""Allow running the CLI with python -m ntfy_cli."""

from ntfy_cli.main import main

if __name__ == "__main__":
    main()
