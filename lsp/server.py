"""LSP server publishing defassign problems for JSON program documents."""
from __future__ import annotations

import asyncio
import hashlib
import logging
import time
from dataclasses import dataclass
from typing import Dict

from pygls.lsp.server import LanguageServer
from lsprotocol import types

from frontend.ir_json import ir_from_json
from analysis import analyze_program
from analysis.diagnostics import Problem
from lsp.diagnostics import to_lsp_diagnostic, error_diagnostic

logger = logging.getLogger(__name__)


@dataclass
class AnalysisCache:
    """Cache for last-good analysis results per document."""

    problems: list[Problem]
    source_hash: str


# Global cache: URI -> AnalysisCache
analysis_cache: Dict[str, AnalysisCache] = {}

# Debouncing: URI -> asyncio.Task
debounce_tasks: Dict[str, asyncio.Task] = {}

# Server settings (updated via workspace/didChangeConfiguration or initializationOptions)
server_settings: Dict[str, object] = {
    "analyze_on_change": False,
    "debounce_seconds": 0.5,
}

# Create server instance
server = LanguageServer(
    "defassign", "v1.0", text_document_sync_kind=types.TextDocumentSyncKind.Full
)


def _compute_hash(source: str) -> str:
    """Compute hash of source text for cache validation."""
    return hashlib.sha256(source.encode("utf-8")).hexdigest()


def _publish(ls: LanguageServer, uri: str, diagnostics: list[types.Diagnostic]) -> None:
    ls.text_document_publish_diagnostics(
        types.PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


def _validate(ls: LanguageServer, uri: str, source: str, force: bool = False) -> None:
    """Analyze a JSON program document and publish diagnostics.

    Args:
        ls: Language server instance
        uri: Document URI
        source: Document source text
        force: If True, bypass cache and force re-analysis
    """
    start_time = time.time()
    logger.info("Analyzing %s", uri)

    source_hash = _compute_hash(source)
    source_lines = source.split("\n")

    # Check cache: skip re-analysis if source unchanged
    if not force and uri in analysis_cache:
        cached = analysis_cache[uri]
        if cached.source_hash == source_hash:
            _publish(ls, uri, [to_lsp_diagnostic(p, source_lines) for p in cached.problems])
            logger.info("Cache hit for %s (source unchanged)", uri)
            return

    try:
        program = ir_from_json(source)
    except ValueError as e:
        # Malformed document: user's mistake
        _publish(ls, uri, [error_diagnostic(f"Invalid program: {e}")])
        logger.error("Loading failed for %s: %s", uri, e)
        return

    try:
        problems = analyze_program(program)
    except Exception as e:
        # Internal error: analyzer bug
        _publish(ls, uri, [error_diagnostic(f"Internal error: {e}")])
        logger.error("Analysis failed for %s: %s", uri, e, exc_info=True)
        return

    _publish(ls, uri, [to_lsp_diagnostic(p, source_lines) for p in problems])
    analysis_cache[uri] = AnalysisCache(problems=problems, source_hash=source_hash)

    elapsed = time.time() - start_time
    logger.info("Analysis complete: %s (%.3fs, %d problems)", uri, elapsed, len(problems))


def _apply_settings(options: dict) -> None:
    if "analyzeOnChange" in options:
        server_settings["analyze_on_change"] = bool(options["analyzeOnChange"])
    if "debounceSeconds" in options:
        server_settings["debounce_seconds"] = float(options["debounceSeconds"])


@server.feature(types.INITIALIZE)
def initialize(ls: LanguageServer, params: types.InitializeParams):
    """Handle initialize request: apply initialization options."""
    logger.info("Server initialized")

    if params.initialization_options and isinstance(params.initialization_options, dict):
        _apply_settings(params.initialization_options)


@server.feature(types.TEXT_DOCUMENT_DID_OPEN)
async def did_open(ls: LanguageServer, params: types.DidOpenTextDocumentParams):
    """Handle document open: analyze immediately."""
    _validate(ls, params.text_document.uri, params.text_document.text)


@server.feature(types.TEXT_DOCUMENT_DID_SAVE)
async def did_save(ls: LanguageServer, params: types.DidSaveTextDocumentParams):
    """Handle document save: analyze immediately (no debounce)."""
    doc = ls.workspace.get_text_document(params.text_document.uri)
    _validate(ls, params.text_document.uri, doc.source)


@server.feature(types.TEXT_DOCUMENT_DID_CHANGE)
async def did_change(ls: LanguageServer, params: types.DidChangeTextDocumentParams):
    """Handle document change: debounce analysis (if enabled)."""
    if not server_settings["analyze_on_change"]:
        return

    uri = params.text_document.uri

    # Cancel existing debounce task if any
    if uri in debounce_tasks:
        debounce_tasks[uri].cancel()

    async def debounced_validate():
        await asyncio.sleep(float(server_settings["debounce_seconds"]))
        doc = ls.workspace.get_text_document(uri)
        _validate(ls, uri, doc.source)
        debounce_tasks.pop(uri, None)

    debounce_tasks[uri] = asyncio.create_task(debounced_validate())


@server.feature(types.TEXT_DOCUMENT_DID_CLOSE)
def did_close(ls: LanguageServer, params: types.DidCloseTextDocumentParams):
    """Handle document close: drop cache and clear published diagnostics."""
    uri = params.text_document.uri
    analysis_cache.pop(uri, None)
    task = debounce_tasks.pop(uri, None)
    if task is not None:
        task.cancel()
    _publish(ls, uri, [])


@server.feature(types.WORKSPACE_DID_CHANGE_CONFIGURATION)
def did_change_configuration(
    ls: LanguageServer, params: types.DidChangeConfigurationParams
):
    """Handle configuration changes from the client."""
    settings = getattr(params, "settings", None)
    if settings and isinstance(settings, dict):
        options = settings.get("defassign", {})
        if isinstance(options, dict):
            _apply_settings(options)
