"""Lifecycle Engine - State transitions with audit trail"""
from .transition_rules import (
    TransitionRuleTable, JOB_POST_TRANSITIONS, APPLICATION_TRANSITIONS, get_rule_table
)
from .precondition_validator import PreconditionValidator
from .permission_gate import PermissionGate
from .audit_trail import AuditTrail
from .executor import TransitionExecutor

__all__ = [
    "TransitionRuleTable",
    "JOB_POST_TRANSITIONS",
    "APPLICATION_TRANSITIONS",
    "get_rule_table",
    "PreconditionValidator",
    "PermissionGate",
    "AuditTrail",
    "TransitionExecutor",
]
