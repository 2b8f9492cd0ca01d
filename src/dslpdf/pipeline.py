"""Orchestration pipeline: validate, auto-fix and render DSL documents."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Optional

import pydantic
import yaml
from pydantic import BaseModel, Field
from rich.console import Console

from .core.autofixer import DSLAutoFixer, auto_fix_dsl
from .core.config import RendererSettings
from .core.exceptions import DSLValidationError
from .core.fetcher import ImageFetcher
from .core.models import Document, ValidationResult
from .core.validator import validate_dsl
from .generators.document_renderer import DocumentRenderer
from .generators.fonts import FontRegistry

logger = logging.getLogger(__name__)
console = Console()

__all__ = [
    "Pipeline",
    "PipelineResult",
    "auto_fix_dsl",
    "load_dsl",
    "render_dsl_to_pdf",
    "validate_dsl",
]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def _model_errors(exc: pydantic.ValidationError) -> list[str]:
    return [
        f"{'.'.join(str(part) for part in err['loc']) or 'document'}: {err['msg']}"
        for err in exc.errors()
    ]


def build_document(dsl: Any) -> Document:
    """Validate a raw DSL mapping and build the typed tree.

    Raises DSLValidationError with every problem found.
    """
    result = validate_dsl(dsl)
    if not result.valid:
        raise DSLValidationError(result.errors)
    try:
        return Document.from_dsl(dsl)
    except pydantic.ValidationError as exc:
        raise DSLValidationError(_model_errors(exc)) from exc


async def render_dsl_to_pdf(
    document: Any,
    *,
    fonts: Optional[FontRegistry] = None,
    settings: Optional[RendererSettings] = None,
    fetcher: Optional[ImageFetcher] = None,
    auto_fix: bool = True,
) -> bytes:
    """Render a DSL document (raw mapping or :class:`Document`) to PDF bytes.

    Raw mappings are validated first and, unless *auto_fix* is False,
    repaired by the auto-fixer. Raises DSLValidationError for structurally
    invalid input; per-element problems only produce placeholders.
    """
    if isinstance(document, Document):
        doc = document
    else:
        validation = validate_dsl(document)
        if not validation.valid:
            raise DSLValidationError(validation.errors)
        doc = build_document(auto_fix_dsl(document) if auto_fix else document)

    renderer = DocumentRenderer(fonts=fonts, settings=settings, fetcher=fetcher)
    return await renderer.render(doc)


def load_dsl(path: str | Path) -> Any:
    """Read a DSL document from a JSON (or YAML) file."""
    path = Path(path).expanduser().resolve()
    if not path.exists():
        raise FileNotFoundError(f"DSL file not found: {path}")
    raw = path.read_text(encoding="utf-8")
    if path.suffix in (".yaml", ".yml"):
        return yaml.safe_load(raw)
    return json.loads(raw)


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------

class PipelineResult(BaseModel):
    """Outcome of one :meth:`Pipeline.run` call."""

    source: str
    output_path: Optional[Path] = None
    pages: int = 0
    size_bytes: int = 0
    fixes_applied: int = 0
    errors: list[str] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.output_path is not None and not self.errors


class Pipeline:
    """End-to-end DSL file -> PDF file pipeline.

    Usage::

        pipeline = Pipeline(settings=load_settings("dslpdf.yaml"))
        result = pipeline.run("report.json", "report.pdf")
        print(result.pages)
    """

    def __init__(
        self,
        settings: Optional[RendererSettings] = None,
        fonts: Optional[FontRegistry] = None,
        fetcher: Optional[ImageFetcher] = None,
    ) -> None:
        self.settings = settings or RendererSettings()
        self.renderer = DocumentRenderer(fonts=fonts, settings=self.settings, fetcher=fetcher)
        self.fixer = DSLAutoFixer(universal_font=self.settings.universal_font)

    def validate(self, dsl: Any) -> ValidationResult:
        return validate_dsl(dsl)

    def run(
        self,
        source_path: str | Path,
        output_path: str | Path,
        *,
        auto_fix: bool = True,
        template: Optional[str] = None,
    ) -> PipelineResult:
        """Load, validate, fix, render and write one document.

        Parameters
        ----------
        source_path
            JSON (or YAML) file holding the DSL document.
        output_path
            Where the PDF is written; parent directories are created.
        auto_fix
            Run the auto-fixer before rendering.
        template
            Template name that replaces the document's own ``template``.
        """
        result = PipelineResult(source=str(source_path))

        # -- Step 1: Load -------------------------------------------------
        console.print(f"\n[bold blue]Loading DSL from:[/] {source_path}")
        try:
            dsl = load_dsl(source_path)
        except (OSError, ValueError, yaml.YAMLError) as exc:
            console.print(f"[bold red]Load failed:[/] {exc}")
            result.errors.append(str(exc))
            return result

        # -- Step 2: Validate ---------------------------------------------
        validation = self.validate(dsl)
        if not validation.valid:
            console.print(f"[bold red]Invalid DSL ({len(validation.errors)} error(s))[/]")
            for err in validation.errors:
                console.print(f"  [red]-[/] {err}")
            result.errors.extend(validation.errors)
            return result
        console.print(f"[green]OK[/] Valid DSL ({len(dsl['pages'])} page(s))")

        # -- Step 3: Auto-fix ---------------------------------------------
        if auto_fix:
            dsl, report = self.fixer.fix_with_report(dsl)
            result.fixes_applied = report.fixes_applied
            console.print(f"[green]OK[/] Auto-fix applied {report.fixes_applied} fix(es)")
        if template:
            dsl = {**dsl, "template": template}

        # -- Step 4: Render -----------------------------------------------
        try:
            document = build_document(dsl)
            pdf = asyncio.run(self.renderer.render(document))
        except DSLValidationError as exc:
            console.print(f"[bold red]Render failed:[/] {exc}")
            result.errors.extend(exc.errors)
            return result

        # -- Step 5: Write ------------------------------------------------
        out = Path(output_path).expanduser().resolve()
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_bytes(pdf)

        result.output_path = out
        result.pages = len(document.pages)
        result.size_bytes = len(pdf)
        console.print(f"[green]OK[/] PDF -> {out} ({len(pdf):,} bytes)")
        return result

