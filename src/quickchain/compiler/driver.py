"""
Expansion Driver

Rust Pattern: rustc_driver::driver

Orchestrates one expansion: (tokenize) -> parse -> passes -> serialize.
"""

import logging
from typing import Optional

from ..codegen.serializer import Serializer
from ..frontend.lexer import TokenTreeLexer
from ..frontend.parser import Parser
from ..passes.base import ExpansionContext, PassManager
from ..passes.quick_expansion import ExpansionStats, ExpansionValidationPass, QuickExpansionPass
from ..shared.errors import QuickchainSourceError
from ..shared.nodes import RootItems
from ..shared.tokens import TokenStream
from ..utils.config import DEFAULT_FIELD_TYPE, DEFAULT_SOURCE_NAME, DEFAULT_TARGET_PATH

logger = logging.getLogger("quickchain.compiler.driver")


class ExpansionResult:
    """Expansion result"""
    def __init__(
        self,
        tokens: Optional[TokenStream] = None,
        items: Optional[RootItems] = None,
        ctx: Optional[ExpansionContext] = None,
        success: bool = False
    ):
        self.tokens = tokens
        self.items = items
        self.ctx = ctx
        self.success = success

    @property
    def reporter(self):
        return self.ctx.reporter if self.ctx else None

    @property
    def stats(self) -> Optional[ExpansionStats]:
        if not self.success or self.ctx is None:
            return None
        return self.ctx.get_analysis(QuickExpansionPass)

    def has_errors(self) -> bool:
        if self.ctx and self.ctx.reporter:
            return self.ctx.reporter.has_errors()
        return not self.success

    def get_errors(self) -> list:
        if self.ctx and self.ctx.reporter.has_errors():
            return [self.ctx.reporter.format_all_errors(color=False)]
        return []


class ExpansionDriver:
    """
    Expansion driver.

    Stateless between calls: every expansion gets a fresh ExpansionContext
    and fresh pass instances, so one driver can serve many callers.
    """

    def __init__(
        self,
        target_path: str = DEFAULT_TARGET_PATH,
        field_type: str = DEFAULT_FIELD_TYPE,
        lexer: Optional[TokenTreeLexer] = None,
    ):
        self.target_path = target_path
        self.field_type = field_type
        self.parser = Parser()
        self.serializer = Serializer(target_path)
        self.pass_manager = PassManager()
        self._lexer = lexer
        self._register_passes()

    def _register_passes(self) -> None:
        self.pass_manager.register_pass(QuickExpansionPass)
        self.pass_manager.register_pass(ExpansionValidationPass)

    @property
    def lexer(self) -> TokenTreeLexer:
        if self._lexer is None:
            self._lexer = TokenTreeLexer()
        return self._lexer

    def _new_context(self, source_file: Optional[str] = None, source: Optional[str] = None) -> ExpansionContext:
        source_files = {source_file: source} if source_file is not None and source is not None else {}
        return ExpansionContext(
            field_type=self.field_type,
            target_path=self.target_path,
            source_files=source_files,
        )

    def _run(self, tokens: TokenStream, ctx: ExpansionContext):
        items = self.parser.parse(tokens)
        rewritten = self.pass_manager.run_all(items, ctx)
        output = self.serializer.serialize(rewritten)
        logger.debug("Expansion produced %d output token tree(s)", len(output))
        return rewritten, output

    def expand(self, tokens: TokenStream) -> TokenStream:
        """
        Token tree in, ``<target>! { ... }`` token tree out.

        Raises ParseError for malformed input.
        """
        _, output = self._run(tuple(tokens), self._new_context())
        return output

    def expand_source(self, source: str, source_file: str = DEFAULT_SOURCE_NAME) -> ExpansionResult:
        """
        Tokenize and expand source text, collecting errors in the reporter.

        Errors in the input are reported, never raised; internal errors
        (QuickchainImplementationError) propagate.
        """
        ctx = self._new_context(source_file, source)
        try:
            tokens = self.lexer.tokenize(source, source_file)
            items, output = self._run(tokens, ctx)
        except QuickchainSourceError as e:
            logger.debug("Expansion of %s failed: %s", source_file, e.message)
            ctx.reporter.report(e)
            return ExpansionResult(ctx=ctx, success=False)
        return ExpansionResult(tokens=output, items=items, ctx=ctx, success=True)
