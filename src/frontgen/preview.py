"""Preview Projector: what the sandboxed live-preview frame shows."""

from .core import is_renderable

UNAVAILABLE_DOCUMENT = (
    '<div style="display:flex;align-items:center;justify-content:center;height:100%;'
    'font-family:sans-serif;color:#555;padding:1rem;text-align:center;">'
    "Live preview is only available for HTML. You can test React/Vue components "
    "in a dedicated development environment.</div>"
)

# No same-origin access and no top navigation: the preview can run its own
# scripts but cannot reach back into the app.
SANDBOX_CSP = "sandbox allow-scripts"


class PreviewProjector:
    """Holds the current preview document, replaced wholesale on every change."""

    def __init__(self):
        self.document = ""
        self.revision = 0

    def project(self, code: str, framework: str) -> str:
        self.document = code if is_renderable(framework) else UNAVAILABLE_DOCUMENT
        self.revision += 1
        return self.document
