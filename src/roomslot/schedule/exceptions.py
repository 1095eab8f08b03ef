#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
class BookingError(Exception):
    pass


class BookingValidationError(BookingError):
    """Raised when a submitted booking is rejected. The attempted
    mutation is never applied."""


class MissingFieldError(BookingValidationError):
    pass


class OverlapError(BookingValidationError):
    pass


class SlotAlignmentError(BookingValidationError):
    pass


class AuthorizationError(BookingError):
    pass


class BookingNotFoundError(BookingError):
    pass
