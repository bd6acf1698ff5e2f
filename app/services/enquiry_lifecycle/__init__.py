# app/services/enquiry_lifecycle/__init__.py
from .enquiry_service import EnquiryService
from .reconciler import EnquiryReconciler, HydrationResult
from .replacement import ReplacementContext, ReplacementOrchestrator

__all__ = [
    "EnquiryService",
    "EnquiryReconciler",
    "HydrationResult",
    "ReplacementContext",
    "ReplacementOrchestrator",
]
