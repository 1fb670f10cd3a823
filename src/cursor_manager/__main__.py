"""Enable running cursor-manager as a module: python -m cursor_manager."""

from cursor_manager.cli import main

if __name__ == "__main__":
    main()
