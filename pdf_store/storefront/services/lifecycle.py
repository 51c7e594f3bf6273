"""
CHECKOUT LIFECYCLE DOMAIN RULES

This module defines the ONLY allowed lifecycle transitions
for a checkout attempt.

DESIGN PRINCIPLES:
- No session writes
- No vendor calls
- No side effects
- Single source of truth
"""

from storefront.services.exceptions import InvalidCheckoutTransitionError

# ============================================================
# PHASES
# ============================================================

PHASE_IDLE = "idle"
PHASE_AWAITING_SDK = "awaiting_sdk"
PHASE_READY_TO_PAY = "ready_to_pay"
PHASE_PROCESSING = "processing"
PHASE_SUCCEEDED = "succeeded"
PHASE_FAILED = "failed"
PHASE_DISMISSED = "dismissed"

PHASES = (
    PHASE_IDLE,
    PHASE_AWAITING_SDK,
    PHASE_READY_TO_PAY,
    PHASE_PROCESSING,
    PHASE_SUCCEEDED,
    PHASE_FAILED,
    PHASE_DISMISSED,
)

VIEW_HOME = "home"
VIEW_SUCCESS = "success"

# ============================================================
# STATE DEFINITIONS
# ============================================================

# A buy action may start a new attempt from any phase (no reentrancy guard).
RESTART_PHASE = PHASE_AWAITING_SDK

# Phases in which the vendor modal is (or may still be) open.
WIDGET_OPEN_PHASES = {
    PHASE_PROCESSING,
    PHASE_FAILED,
}

# Phases in which an attempt is in flight from the buyer's point of view.
IN_FLIGHT_PHASES = {
    PHASE_AWAITING_SDK,
    PHASE_READY_TO_PAY,
    PHASE_PROCESSING,
}

ALLOWED_TRANSITIONS = {
    PHASE_IDLE: set(),
    PHASE_AWAITING_SDK: {
        PHASE_READY_TO_PAY,
        PHASE_IDLE,
    },
    PHASE_READY_TO_PAY: {
        PHASE_PROCESSING,
        PHASE_IDLE,
    },
    PHASE_PROCESSING: {
        PHASE_SUCCEEDED,
        PHASE_FAILED,
        PHASE_DISMISSED,
    },
    # Vendor modal stays open after an in-modal failure; the buyer can retry.
    PHASE_FAILED: {
        PHASE_SUCCEEDED,
        PHASE_FAILED,
        PHASE_DISMISSED,
        PHASE_IDLE,
    },
    PHASE_SUCCEEDED: {
        PHASE_IDLE,
    },
    PHASE_DISMISSED: {
        PHASE_IDLE,
    },
}


# ============================================================
# DOMAIN RULES
# ============================================================


def can_transition(*, from_phase: str, to_phase: str) -> bool:
    if from_phase not in ALLOWED_TRANSITIONS:
        return False

    if to_phase == RESTART_PHASE:
        return True

    return to_phase in ALLOWED_TRANSITIONS.get(from_phase, set())


def validate_transition(*, state, target_phase: str):
    if not can_transition(
        from_phase=state.phase,
        to_phase=target_phase,
    ):
        raise InvalidCheckoutTransitionError(
            f"Checkout cannot transition from "
            f"'{state.phase}' to '{target_phase}'"
        )


def is_in_flight(phase: str) -> bool:
    return phase in IN_FLIGHT_PHASES
