"""Rule engine: run every rule over a song and collect the findings."""

import logging
from concurrent.futures import ThreadPoolExecutor

from .config import settings
from .exceptions import RuleError
from .models import Finding, Song
from .registry import RuleSet, default_rules
from .rules.base import Rule

logger = logging.getLogger(__name__)


def lint(song: Song, rules: RuleSet | None = None, max_workers: int | None = None) -> tuple[Finding, ...]:
    """Evaluate *rules* against *song*.

    Findings come back in rule-registration order, then in the order each
    rule emitted them, whether or not the rules ran in parallel.  Findings
    are never deduplicated.

    Args:
        song:        The song to check.
        rules:       Rules to run; defaults to :func:`default_rules`.
        max_workers: Threads to spread rules over; defaults to
                     ``settings.max_workers``.  1 runs them inline.

    Raises:
        RuleError: if a rule raises.
    """
    rule_list = list(rules if rules is not None else default_rules())
    workers = settings.max_workers if max_workers is None else max_workers

    if workers > 1 and len(rule_list) > 1:
        logger.debug(f"Linting with {len(rule_list)} rules on {workers} threads")
        with ThreadPoolExecutor(max_workers=workers) as pool:
            # map() yields results in submission order.
            batches = list(pool.map(lambda rule: _run_rule(rule, song), rule_list))
    else:
        batches = [_run_rule(rule, song) for rule in rule_list]

    findings = tuple(finding for batch in batches for finding in batch)
    logger.info(f"Lint: {len(findings)} finding(s) from {len(rule_list)} rule(s)")
    return findings


def _run_rule(rule: Rule, song: Song) -> list[Finding]:
    try:
        findings = list(rule.check(song))
    except Exception as exc:
        raise RuleError(rule.name, str(exc) or type(exc).__name__) from exc
    logger.debug(f"  {rule.name}: {len(findings)} finding(s)")
    return findings
