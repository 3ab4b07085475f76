"""
Badge Evaluation Engine — one pass per (domain, user) trigger.

Pass
----
  1. Load    : read the user's granted badge names once.
  2. Filter  : keep the domain's rules whose badge is not held yet.
  3. Evaluate: ask the domain's ActivityHistory each rule's predicate.
  4. Grant   : write every rule that now qualifies to the ledger.

Rules are evaluated in catalogue order, but no rule depends on another's
grant, so the set of badges a pass awards depends only on the history
snapshot and the grant set read in step 1.

Failures
--------
Nothing is recovered here. Any exception from the history store or the
ledger stops the pass and propagates so the trigger is redelivered.
Grants written before the failure stay written; the redelivered pass
skips them in step 2 (and the ledger would ignore them anyway).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sqlalchemy.orm import Session

from badge_worker.services import badge_ledger
from badge_worker.services.activity_history import history_for
from badge_worker.services.rule_catalogue import ActivityDomain, rules_for

logger = logging.getLogger(__name__)


@dataclass
class EvaluationResult:
    """Summary of one pass. Lists hold badge names."""
    domain: ActivityDomain
    user_id: str
    granted: list[str] = field(default_factory=list)
    already_held: list[str] = field(default_factory=list)
    not_met: list[str] = field(default_factory=list)


def evaluate_domain(db: Session, domain: ActivityDomain, user_id: str) -> EvaluationResult:
    result = EvaluationResult(domain=domain, user_id=user_id)
    try:
        held = badge_ledger.get_grants(db, user_id)
        history = history_for(db, domain)

        for rule in rules_for(domain):
            if rule.badge_name in held:
                result.already_held.append(rule.badge_name)
                continue
            if not rule.predicate.evaluate(history, user_id):
                result.not_met.append(rule.badge_name)
                continue
            if badge_ledger.grant(db, user_id, rule.badge_name):
                logger.info("Granted %r (%s) to user %s", rule.badge_name, rule.key, user_id)
                result.granted.append(rule.badge_name)
            else:
                result.already_held.append(rule.badge_name)
    except Exception:
        logger.exception(
            "Badge evaluation failed for domain=%s user=%s after granting %s",
            domain.value, user_id, result.granted,
        )
        raise

    return result
