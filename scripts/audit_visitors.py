"""Two-pass audit of dispatch-table and visitor coverage.

Pass 1 (Dispatch Comparison):
    Parses a source sample, collects all named AST node types, compares
    them against the dispatcher's HANDLER_NAMES table. Types absent from
    the table take the "unsupported" path whenever they are visited.

Pass 2 (Runtime Diagnostics):
    Translates the sample with every registered target visitor and
    collects the diagnostics it reports, with the offending source text.

Usage:
    python scripts/audit_visitors.py [file.ts ...]
"""

from __future__ import annotations

import dataclasses
import logging
import sys
from pathlib import Path

from translator.api import translate
from translator.dispatcher import HANDLER_NAMES
from translator.languages import SUPPORTED_VISITORS
from translator.options import TranslateOptions
from translator.parser import parse_source

logging.basicConfig(level=logging.INFO, format="%(message)s")
logger = logging.getLogger(__name__)

LANGUAGE = "typescript"

SAMPLE = r"""
import * as cdk from '@aws-cdk/core';
import { Bucket, BucketProps as Props } from '@aws-cdk/aws-s3';

interface GreeterProps {
  readonly greeting: string;
  readonly shout?: boolean;
}

// === functions with struct parameters ===
function greet(name: string, props: GreeterProps) {
  if (props.shout) {
    console.log(`${props.greeting}, ${name}!`);
  } else if (name === 'world') {
    console.log('hello');
  } else {
    return;
  }
}

greet('you', { greeting: 'hi', shout: true });

// === classes ===
class Stack extends cdk.Stack {
  private readonly count = 0;

  constructor(scope: cdk.Construct, id: string) {
    super(scope, id);
    const bucket = new Bucket(this, 'Bucket', {
      versioned: true,
    });
    for (const item of [1, 2, 3]) {
      this.add(item);
    }
  }
}

// === expressions not in the dispatch table ===
const f = (x: number) => x * 2;
let y = cond ? 1 : 2;
y += 1;
while (y > 0) { y--; }
"""


@dataclasses.dataclass(frozen=True)
class AuditResult:
    """Result of a two-pass audit for one source sample."""

    name: str
    total_ast_types: int
    handled_count: int
    unhandled: list[str]
    diagnostics: dict[str, list[str]]


def collect_ast_types(source: str) -> set[str]:
    """Parse source and collect all unique named AST node types."""
    _, root = parse_source(source, LANGUAGE)
    types: set[str] = set()
    stack = [root]
    while stack:
        node = stack.pop()
        types.add(node.kind)
        stack.extend(node.children)
    return types


def run_diagnostics_check(source: str, target: str) -> list[str]:
    """Translate *source* with *target* and describe every diagnostic."""
    translation = translate(source, TranslateOptions(language=LANGUAGE, target=target))
    return [
        f"{d.node_kind}  ({source[d.start:d.end].strip()[:80]})"
        for d in translation.diagnostics
    ]


def audit_source(name: str, source: str) -> AuditResult:
    all_types = collect_ast_types(source)
    handled = {kind.value for kind in HANDLER_NAMES}
    return AuditResult(
        name=name,
        total_ast_types=len(all_types),
        handled_count=len(handled & all_types),
        unhandled=sorted(all_types - handled),
        diagnostics={
            target: run_diagnostics_check(source, target)
            for target in sorted(SUPPORTED_VISITORS)
        },
    )


def print_result(result: AuditResult):
    logger.info("")
    logger.info("=== AUDIT: %s ===", result.name)
    logger.info("")
    logger.info("Pass 1 -- Dispatch table coverage:")
    logger.info("  AST types found in source:     %3d", result.total_ast_types)
    logger.info("  Handled:                       %3d", result.handled_count)
    logger.info("  Unhandled:                     %3d", len(result.unhandled))
    for gap in result.unhandled:
        logger.info("      - %s", gap)

    logger.info("")
    logger.info("Pass 2 -- Runtime diagnostics:")
    for target, entries in result.diagnostics.items():
        logger.info("  %-12s %3d", target, len(entries))
        for entry in entries:
            logger.info("      - %s", entry)


def main(paths: list[str]):
    if not paths:
        print_result(audit_source("<sample>", SAMPLE))
        return
    for path in paths:
        print_result(audit_source(path, Path(path).read_text(encoding="utf-8")))


if __name__ == "__main__":
    main(sys.argv[1:])
