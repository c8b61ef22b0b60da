"""Minimal LSP server for plexer: unmatched-character diagnostics."""

from __future__ import annotations

import argparse
from pathlib import Path

from lsprotocol.types import (
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidOpenTextDocumentParams,
    Position,
    PublishDiagnosticsParams,
    Range,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer

from plexer import __version__
from plexer.config import lexer_from_config, load_config
from plexer.errors import DefinitionError, LexError
from plexer.lexer import Lexer


class PlexerServer(LanguageServer):
    """Language server holding the lexer used to check documents."""

    def __init__(self, lexer: Lexer | None = None) -> None:
        super().__init__(
            "plexer-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full
        )
        self.lexer = lexer


server = PlexerServer()


def diagnostics_for(lexer: Lexer, source: str) -> list[Diagnostic]:
    """One Error diagnostic per unmatched character in *source*."""
    diagnostics: list[Diagnostic] = []
    for item in lexer.scan(source):
        if not isinstance(item, LexError):
            continue
        line = item.position.line - 1
        col = item.position.column - 1
        diagnostics.append(
            Diagnostic(
                range=Range(
                    start=Position(line=line, character=col),
                    end=Position(line=line, character=col + 1),
                ),
                message=item.message,
                severity=DiagnosticSeverity.Error,
                source="plexer",
            )
        )
    return diagnostics


def _validate(ls: PlexerServer, uri: str) -> None:
    """Tokenize the document and publish diagnostics."""
    if ls.lexer is None:
        return
    doc = ls.workspace.get_text_document(uri)
    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics_for(ls.lexer, doc.source))
    )


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: PlexerServer, params: DidOpenTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: PlexerServer, params: DidChangeTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


def main(argv: list[str] | None = None) -> None:
    p = argparse.ArgumentParser(prog="plexer-lsp", description="plexer language server")
    p.add_argument("-c", "--config", metavar="FILE", required=True, help="Token definitions")
    args = p.parse_args(argv)
    config_path = Path(args.config)
    if not config_path.is_file():
        p.error(f"config file not found: {config_path}")
    try:
        server.lexer = lexer_from_config(load_config(config_path, config_path.parent))
    except DefinitionError as exc:
        p.error(str(exc))
    server.start_io()
