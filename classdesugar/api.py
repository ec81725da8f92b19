"""Composable API functions for the source-side pipelines.

Each function corresponds to a CLI workflow but is callable programmatically
without argparse.
"""

from __future__ import annotations

import logging

from .descriptor import ClassDescriptor
from .frontend import JavaScriptClassFrontend
from .ir import IRInstruction
from .lowering import LoweringConfig, dump_ir, lower_descriptors
from .parser import parse_source
from . import constants

logger = logging.getLogger(__name__)


def describe_source(
    source: str, language: str = constants.DEFAULT_LANGUAGE
) -> list[ClassDescriptor]:
    """Parse source code and describe every class it contains.

    Args:
        source: The source code text.
        language: Source language name; only "javascript" is supported.

    Returns:
        One descriptor per class declaration or class expression, in source
        order (outer classes before the classes nested inside them).
    """
    logger.info("Describing classes (%s, %d bytes)", language, len(source))
    tree = parse_source(source, language)
    return JavaScriptClassFrontend().describe(tree, source.encode("utf-8"))


def lower_source(
    source: str,
    language: str = constants.DEFAULT_LANGUAGE,
    config: LoweringConfig = LoweringConfig(),
) -> list[IRInstruction]:
    """Describe the classes in *source* and lower them to IR."""
    return lower_descriptors(describe_source(source, language), config)


def dump_source_ir(
    source: str,
    language: str = constants.DEFAULT_LANGUAGE,
    config: LoweringConfig = LoweringConfig(),
) -> str:
    """Lower the classes in *source* and return a human-readable IR dump."""
    return dump_ir(lower_source(source, language, config))
