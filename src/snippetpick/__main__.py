"""Allow ``python -m snippetpick``."""

from .app import main

if __name__ == "__main__":  # pragma: no cover - CLI entry
    main()
