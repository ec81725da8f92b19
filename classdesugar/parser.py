"""Tree-Sitter Parsing Layer for class sources."""

from __future__ import annotations

import functools
import logging

from tree_sitter import Tree

from . import constants

logger = logging.getLogger(__name__)


@functools.lru_cache(maxsize=None)
def _language_parser(language: str):
    import tree_sitter_language_pack as tslp

    logger.debug("Loading tree-sitter grammar for %s", language)
    return tslp.get_parser(language)


def parse_source(source: str, language: str = constants.DEFAULT_LANGUAGE) -> Tree:
    """Parse *source* with the grammar for *language*.

    Raises ``ValueError`` if no class frontend exists for *language*.
    """
    if language not in constants.SUPPORTED_SOURCE_LANGUAGES:
        raise ValueError(f"Unsupported language for class descriptors: {language}")
    tree = _language_parser(language).parse(source.encode("utf-8"))
    if tree.root_node.has_error:
        logger.warning("Source has syntax errors; describing what parsed")
    return tree
