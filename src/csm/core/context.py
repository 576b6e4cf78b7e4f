"""
Build context.

Holds the state shared by compile calls within one build: the fragment
store, the bundler and the accumulated variable definitions. A build starts
the context, runs its compile calls one after another, then flushes it.

Usage::

    from csm import BuildContext, compile_declarations, load_config

    with BuildContext(load_config()) as ctx:
        classes = compile_declarations(ctx, "foo", "display: flex, width: 5rem")
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime

from .bundler import Bundler
from .errors import BuildContextError
from .fragments import FileFragmentStore, FragmentStore
from .manifest import CsmConfig
from .variables import VariableStore

logger = logging.getLogger(__name__)


class BuildContext:
    """
    Build-scoped compiler state.

    Args:
        config: Build configuration (default: CsmConfig.default())
        store: Fragment store (default: FileFragmentStore at config.build.output_dir)
        clock: Time source used for staleness checks
    """

    def __init__(
        self,
        config: CsmConfig | None = None,
        store: FragmentStore | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.config = config or CsmConfig.default()
        build = self.config.build
        self.store = store or FileFragmentStore(build.output_dir)
        self.bundler = Bundler(
            self.store,
            minify=build.minify,
            stale_after=build.stale_after,
            keep_aggregate=build.keep_aggregate,
            clock=clock,
        )
        self.variables = VariableStore()
        self.started = False

    def start(self) -> BuildContext:
        """Initialize the store. Variable definitions start empty."""
        self.store.ensure()
        self.variables.clear()
        self.started = True
        logger.debug("Build context started")
        return self

    def flush(self) -> str:
        """
        End the build: rebuild the bundle one last time and drop variable state.

        Returns:
            Final bundle text
        """
        self.require_started()
        try:
            return self.bundler.rebuild()
        finally:
            self.variables.clear()
            self.started = False
            logger.debug("Build context flushed")

    def require_started(self) -> None:
        if not self.started:
            raise BuildContextError("build context is not started; call start() first")

    def rebuild(self) -> str:
        self.require_started()
        return self.bundler.rebuild()

    def __enter__(self) -> BuildContext:
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.flush()
        else:
            # A failed build keeps its last good bundle
            self.variables.clear()
            self.started = False


@contextmanager
def build_context(
    config: CsmConfig | None = None,
    store: FragmentStore | None = None,
) -> Iterator[BuildContext]:
    """Start a BuildContext and flush it when the block exits cleanly."""
    with BuildContext(config, store) as ctx:
        yield ctx
