"""Business logic services for the HookLab application."""

from .gating import GatingWorkflow
from .generation import ContentExpander, HookGenerator
from .premium import PremiumOracle
from .quota import QuotaLedger
from .trends import TrendSummarizer

__all__ = [
    "ContentExpander",
    "GatingWorkflow",
    "HookGenerator",
    "PremiumOracle",
    "QuotaLedger",
    "TrendSummarizer",
]
