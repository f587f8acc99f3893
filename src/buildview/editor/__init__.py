"""Documents opened from build diagnostics and the view that shows them."""

from buildview.editor.document import Document, DocumentRegistry
from buildview.editor.view import DocumentEditorView

__all__ = ["Document", "DocumentEditorView", "DocumentRegistry"]
