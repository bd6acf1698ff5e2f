# app/services/enquiry_lifecycle/errors.py
"""Errors raised by the enquiry lifecycle. The API layer maps each to an HTTP status."""


class EnquiryLifecycleError(Exception):
    """Base class for enquiry lifecycle failures."""


class EnquiryNotFoundError(EnquiryLifecycleError):
    def __init__(self, enquiry_id: str):
        self.enquiry_id = enquiry_id
        super().__init__(f"Enquiry {enquiry_id} not found")


class SupplierProfileNotFoundError(EnquiryLifecycleError):
    def __init__(self, auth_user_id: str):
        self.auth_user_id = auth_user_id
        super().__init__(
            "No supplier profile found. Please complete your supplier onboarding first."
        )


class SupplierAccessDeniedError(EnquiryLifecycleError):
    def __init__(self, supplier_id: str):
        self.supplier_id = supplier_id
        super().__init__(f"Business {supplier_id} does not belong to this account")


class InvalidDecisionError(EnquiryLifecycleError):
    def __init__(self, decision):
        self.decision = decision
        super().__init__(
            f"Invalid response type {decision!r}. Must be 'accepted' or 'declined'"
        )


class InvalidTransitionError(EnquiryLifecycleError):
    def __init__(self, enquiry_id: str, old_status: str, new_status: str):
        self.enquiry_id = enquiry_id
        self.old_status = old_status
        self.new_status = new_status
        super().__init__(
            f"Cannot move enquiry {enquiry_id} from '{old_status}' to '{new_status}'"
        )


class ConcurrentUpdateError(EnquiryLifecycleError):
    def __init__(self, enquiry_id: str, expected_version: int):
        self.enquiry_id = enquiry_id
        self.expected_version = expected_version
        super().__init__(
            f"Enquiry {enquiry_id} was modified concurrently (expected version "
            f"{expected_version}). Reload and try again."
        )
