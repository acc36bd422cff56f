"""Decide whether sensitive features (payments, rankings, trades) stay enabled."""
from __future__ import annotations

from typing import Callable

from device_integrity.models import PolicyDecision, RootVerdict

EmulatorCheck = Callable[[], bool]
RootCheck = Callable[[], RootVerdict]

ROOTED_DEVICE_MESSAGE = "rooted device: {reason}"
ROOTED_EMULATOR_MESSAGE = "rooted emulator: {reason}"


class PolicyEvaluator:
    """Emulators run unrestricted unless they are rooted as well.

    On physical hardware root alone is enough to restrict.
    """

    def __init__(self, emulator_check: EmulatorCheck, root_check: RootCheck) -> None:
        self.emulator_check = emulator_check
        self.root_check = root_check

    def evaluate(self) -> PolicyDecision:
        is_emulator = self.emulator_check()
        verdict = self.root_check()
        if not verdict.is_rooted:
            return PolicyDecision(restrict=False)
        template = ROOTED_EMULATOR_MESSAGE if is_emulator else ROOTED_DEVICE_MESSAGE
        return PolicyDecision(restrict=True, reason=template.format(reason=verdict.reason))


__all__ = ["PolicyEvaluator"]
