"""Document orchestrator - coordinates document generation.

Pipeline:
    catalog JSON -> Catalog -> Context (built once)
    template file -> Template -> Evaluator -> sanitize -> output file

A failed document is recorded in the run summary and does not stop the
others. A malformed catalog stops the whole run before any rendering.
"""

import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from shaderdocs.catalog import Catalog, load_catalog
from shaderdocs.config import Config, DocumentJob, ProjectConfig, load_project_config
from shaderdocs.templates import (
    Context,
    ContextBuilder,
    Evaluator,
    RenderDepthError,
    TemplateSyntaxError,
    parse_template,
    sanitize_output,
)

logger = logging.getLogger(__name__)


@dataclass
class DocumentResult:
    """Outcome of rendering one document."""

    job: DocumentJob
    success: bool
    error: str | None = None
    chars: int = 0


@dataclass
class RunSummary:
    """Result of a rendering run."""

    results: list[DocumentResult] = field(default_factory=list)
    started_at: datetime = field(default_factory=datetime.now)
    completed_at: datetime | None = None

    @property
    def succeeded(self) -> list[DocumentResult]:
        return [r for r in self.results if r.success]

    @property
    def failed(self) -> list[DocumentResult]:
        return [r for r in self.results if not r.success]

    @property
    def ok(self) -> bool:
        return not self.failed

    def log(self) -> None:
        """Write the per-document summary to the log."""
        logger.info(
            f"Rendered {len(self.succeeded)}/{len(self.results)} documents"
            + (f" ({len(self.failed)} failed)" if self.failed else "")
        )
        for result in self.succeeded:
            logger.info(f"  OK     {result.job.output} ({result.chars} chars)")
        for result in self.failed:
            logger.error(f"  FAILED {result.job.template}: {result.error}")


class DocumentRenderer:
    """Renders templates against a shared Context.

    render_text() is pure; render_document() adds file I/O and turns
    per-document failures into a DocumentResult.
    """

    def __init__(self, evaluator: Evaluator | None = None):
        self._evaluator = evaluator or Evaluator(max_depth=Config.MAX_RENDER_DEPTH)

    def render_text(self, template_text: str, context: Context, name: str = "<template>") -> str:
        """Parse, evaluate and sanitize a template.

        Raises:
            TemplateSyntaxError: template could not be parsed
            RenderDepthError: nesting limit exceeded
        """
        template = parse_template(template_text, name=name)
        rendered = self._evaluator.render(template, context)
        return sanitize_output(rendered, name=name)

    def render_document(self, job: DocumentJob, context: Context) -> DocumentResult:
        """Render one template file to its output file."""
        template_path = Path(job.template)
        output_path = Path(job.output)
        try:
            source = template_path.read_text(encoding="utf-8")
            text = self.render_text(source, context, name=str(template_path))
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(text, encoding="utf-8")
        except TemplateSyntaxError as e:
            logger.error(f"Parse error in {template_path}: {e}")
            return DocumentResult(job=job, success=False, error=f"parse error: {e}")
        except RenderDepthError as e:
            logger.error(f"Render depth exceeded in {template_path}: {e}")
            return DocumentResult(job=job, success=False, error=f"depth limit: {e}")
        except UnicodeDecodeError as e:
            logger.error(f"Template {template_path} is not valid UTF-8: {e}")
            return DocumentResult(job=job, success=False, error=f"decode error: {e}")
        except OSError as e:
            logger.error(f"I/O error for {template_path} -> {output_path}: {e}")
            return DocumentResult(job=job, success=False, error=f"I/O error: {e}")

        logger.debug(f"Rendered {template_path} -> {output_path} ({len(text)} chars)")
        return DocumentResult(job=job, success=True, chars=len(text))


class Orchestrator:
    """Coordinates document generation.

    Usage:
        orchestrator = Orchestrator()
        context = orchestrator.build_context(catalog, project)
        summary = orchestrator.render_all(project.documents, context)
        summary.log()
    """

    def __init__(
        self,
        renderer: DocumentRenderer | None = None,
        max_workers: int | None = None,
    ):
        self._renderer = renderer or DocumentRenderer()
        self._max_workers = max_workers or Config.RENDER_WORKERS

    def build_context(self, catalog: Catalog, project: ProjectConfig) -> Context:
        """Build the shared Context, honouring pre-grouped catalogs."""
        builder = ContextBuilder(project.licence, project.category_order)
        if catalog.groups is not None:
            return builder.build_from_groups(catalog.groups, version=project.version)
        return builder.build(catalog.entries, version=project.version)

    def render_all(self, jobs: Sequence[DocumentJob], context: Context) -> RunSummary:
        """Render every job. Results come back in job order."""
        summary = RunSummary()
        if not jobs:
            logger.warning("No documents to render")
            summary.completed_at = datetime.now()
            return summary

        workers = max(1, min(self._max_workers, len(jobs)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [
                executor.submit(self._renderer.render_document, job, context) for job in jobs
            ]
            summary.results = [future.result() for future in futures]

        summary.completed_at = datetime.now()
        return summary


def run_from_config(
    catalog_path: str | Path | None = None,
    project_config_path: str | Path | None = None,
    documents: Sequence[DocumentJob] | None = None,
) -> RunSummary:
    """Main entry point: load inputs, build the Context once, render everything.

    Args:
        catalog_path: Catalog JSON (default: Config.CATALOG_PATH)
        project_config_path: package-config.json (default: Config.PROJECT_CONFIG_PATH)
        documents: Jobs to render instead of the ones in the project config

    Raises:
        CatalogError: catalog missing or malformed
        ConfigError: project config malformed
    """
    project = load_project_config(project_config_path)
    catalog = load_catalog(catalog_path or Config.CATALOG_PATH, project.category_order)

    orchestrator = Orchestrator()
    context = orchestrator.build_context(catalog, project)

    jobs = list(documents) if documents is not None else list(project.documents)
    logger.info(f"Rendering {len(jobs)} document(s)")
    summary = orchestrator.render_all(jobs, context)
    summary.log()
    return summary
