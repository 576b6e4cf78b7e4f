"""
Bundle builder.

Assembles every stored fragment into one stylesheet:

1. list fragments and warn about ones not rewritten for a while
2. write an aggregate document with one `@import` per fragment
   (variable block first, then fragment ids in lexicographic order)
3. resolve the imports into one document
4. split it into flat rules, drop repeated selector+body pairs, minify
5. replace the bundle atomically

Every step before the final write works on in-memory text, so a failure
never leaves a partially written bundle behind. The rebuild runs after each
fragment write and always starts from scratch.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from .errors import ImportResolutionError, MinifyError
from .fragments import VARIABLES_FRAGMENT_ID, FragmentInfo, FragmentStore

logger = logging.getLogger(__name__)

DEFAULT_STALE_AFTER = timedelta(hours=24)

_IMPORT_RE = re.compile(
    r"""@import\s+(?:url\(\s*)?["'](?P<location>[^"']+)["']\s*\)?\s*;""",
)
_COMMENT_RE = re.compile(r"/\*.*?\*/", re.S)
_WS_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class CssRule:
    """One flat `selector { declarations }` block."""

    selector: str
    declarations: tuple[str, ...]

    @property
    def key(self) -> tuple[str, tuple[str, ...]]:
        return (self.selector, self.declarations)


# =============================================================================
# Aggregate document
# =============================================================================


def order_fragments(fragments: list[FragmentInfo]) -> list[FragmentInfo]:
    """Variable block first, then lexicographic by fragment id."""
    return sorted(
        fragments,
        key=lambda f: (f.fragment_id != VARIABLES_FRAGMENT_ID, f.fragment_id),
    )


def build_aggregate(fragments: list[FragmentInfo]) -> str:
    return "".join(f'@import "{fragment.location}";\n' for fragment in fragments)


def resolve_imports(
    text: str,
    resolver: Callable[[str], str],
    _stack: tuple[str, ...] = (),
) -> str:
    """
    Inline every `@import` in `text`, recursively.

    Raises:
        ImportResolutionError: On an unresolvable or circular import
    """

    def _inline(match: re.Match[str]) -> str:
        location = match.group("location")
        if location in _stack:
            chain = " -> ".join((*_stack, location))
            raise ImportResolutionError(f"circular @import: {chain}")
        return resolve_imports(resolver(location), resolver, (*_stack, location)) + "\n"

    return _IMPORT_RE.sub(_inline, text)


# =============================================================================
# Parsing, dedup and printing
# =============================================================================


def _normalize_declaration(decl: str) -> str:
    decl = _WS_RE.sub(" ", decl.strip())
    prop, sep, value = decl.partition(":")
    if not sep:
        raise MinifyError(f"malformed declaration {decl!r}: expected `property: value`")
    return f"{prop.strip()}:{value.strip()}"


def parse_rules(css: str) -> list[CssRule]:
    """
    Split flat CSS into rules.

    Raises:
        MinifyError: On nested or unbalanced braces, or text outside a rule
    """
    css = _COMMENT_RE.sub("", css)
    rules: list[CssRule] = []
    pos = 0

    while True:
        open_idx = css.find("{", pos)
        if open_idx == -1:
            trailing = css[pos:].strip()
            if trailing:
                raise MinifyError(f"unexpected text outside of a rule: {trailing[:40]!r}")
            break

        selector = _WS_RE.sub(" ", css[pos:open_idx].strip())
        if not selector or "}" in selector:
            raise MinifyError(f"unbalanced braces near offset {open_idx}")

        close_idx = css.find("}", open_idx + 1)
        if close_idx == -1:
            raise MinifyError(f"unterminated rule for selector {selector!r}")
        body = css[open_idx + 1 : close_idx]
        if "{" in body:
            raise MinifyError(f"nested block inside {selector!r} is not supported")

        declarations = tuple(
            _normalize_declaration(part) for part in body.split(";") if part.strip()
        )
        rules.append(CssRule(selector=selector, declarations=declarations))
        pos = close_idx + 1

    return rules


def dedupe_rules(rules: list[CssRule]) -> list[CssRule]:
    """Drop empty rules and repeated selector+body pairs, keeping first occurrences."""
    seen: set[tuple[str, tuple[str, ...]]] = set()
    unique: list[CssRule] = []
    for rule in rules:
        if not rule.declarations or rule.key in seen:
            continue
        seen.add(rule.key)
        unique.append(rule)
    return unique


def print_rules(rules: list[CssRule], minify: bool = True) -> str:
    if minify:
        return "".join(f"{rule.selector}{{{';'.join(rule.declarations)}}}" for rule in rules)

    blocks = []
    for rule in rules:
        lines = [f"  {decl.replace(':', ': ', 1)};" for decl in rule.declarations]
        blocks.append(rule.selector + " {\n" + "\n".join(lines) + "\n}")
    return "\n\n".join(blocks) + ("\n" if blocks else "")


def minify_css(css: str) -> str:
    """Parse, dedupe and minify a flat stylesheet."""
    return print_rules(dedupe_rules(parse_rules(css)), minify=True)


# =============================================================================
# Bundler
# =============================================================================


class Bundler:
    """Rebuilds the bundle artifact of a fragment store."""

    def __init__(
        self,
        store: FragmentStore,
        *,
        minify: bool = True,
        stale_after: timedelta = DEFAULT_STALE_AFTER,
        keep_aggregate: bool = False,
        clock: Callable[[], datetime] | None = None,
    ):
        self.store = store
        self.minify = minify
        self.stale_after = stale_after
        self.keep_aggregate = keep_aggregate
        self.clock = clock or (lambda: datetime.now(UTC))

    def stale_fragments(self, fragments: list[FragmentInfo]) -> list[FragmentInfo]:
        now = self.clock()
        return [f for f in fragments if now - f.modified_at > self.stale_after]

    def rebuild(self) -> str:
        """
        Rebuild the bundle from every current fragment.

        Returns:
            The bundle text that was written

        Raises:
            StoreError: Fragments cannot be listed/read or the bundle cannot be written
            BundleError: Imports cannot be resolved or the CSS cannot be minified
        """
        fragments = order_fragments(self.store.list_fragments())

        for fragment in self.stale_fragments(fragments):
            logger.warning(
                "%s not being used in a while, consider manually deleting it "
                "or it will end up in your bundle",
                fragment.location,
            )

        location = self.store.write_aggregate(build_aggregate(fragments))
        source = resolve_imports(self.store.read_aggregate(location), self.store.resolve_import)

        rules = dedupe_rules(parse_rules(source))
        bundle = print_rules(rules, minify=self.minify)

        self.store.write_bundle(bundle)
        if not self.keep_aggregate:
            self.store.discard_aggregate(location)

        logger.info("Rebuilt bundle from %d fragment(s), %d rule(s)", len(fragments), len(rules))
        return bundle
