"""PySide6 host: the editor window and the quick-pick dialog."""
