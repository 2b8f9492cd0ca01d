"""dslpdf: render declarative JSON documents to PDF.

A DSL document is a list of pages, each holding absolutely positioned
``text``, ``image`` and ``chart`` elements. Rendering runs three stages:

    1. **Validate** - structural check, every problem reported at once.
    2. **Auto-fix** - fill in RTL direction, alignment and font hints.
    3. **Render** - draw pages with ReportLab and return the PDF bytes.

Modules
-------
core/        - DSL models, validator, auto-fixer, image fetcher, settings
generators/  - canvas surface, fonts, templates, text/image/chart renderers
utils/       - colour parsing, bidirectional text, language defaults
pipeline     - public API and the file-to-file Pipeline
cli          - ``dslpdf`` command line
"""

__version__ = "0.1.0"

from .core.autofixer import auto_fix_dsl
from .core.config import RendererSettings, load_settings
from .core.exceptions import DSLError, DSLValidationError, ImageSourceError
from .core.models import Document, ValidationResult
from .core.validator import validate_dsl
from .generators.fonts import FontAsset, FontRegistry
from .pipeline import Pipeline, PipelineResult, render_dsl_to_pdf

__all__ = [
    "DSLError",
    "DSLValidationError",
    "Document",
    "FontAsset",
    "FontRegistry",
    "ImageSourceError",
    "Pipeline",
    "PipelineResult",
    "RendererSettings",
    "ValidationResult",
    "auto_fix_dsl",
    "load_settings",
    "render_dsl_to_pdf",
    "validate_dsl",
    "__version__",
]
