"""Custom error types for xray_proxy."""

from typing import ClassVar


class XRayError(Exception):
    """Base class for all xray_proxy errors."""


class XRayResolutionError(XRayError):
    """Raised when a static x-ray target cannot be resolved to a class."""

    target_name: str

    def __init__(self, target_name: str) -> None:
        """Initialize a resolution failure.

        :param target_name: Class name exactly as supplied by the caller.
        """
        self.target_name = target_name
        super().__init__(f"The class '{target_name}' does not exist")


class MemberNotFoundError(XRayError, AttributeError):
    """Raised when no member and no overflow handler match a requested name."""

    member_kind: ClassVar[str] = "member"
    member_name: str
    target_name: str

    def __init__(self, member_name: str, target_name: str, is_static: bool = False) -> None:
        """Initialize a missing-member error.

        :param member_name: Requested member name.
        :param target_name: Name of the concrete target class.
        :param is_static: Whether the lookup went through a static x-ray.
        """
        self.member_name = member_name
        self.target_name = target_name
        label: str = self.member_kind.capitalize()
        message: str = f'{label} "{member_name}" does not exist on object of class "{target_name}"'
        if is_static is True:
            message = f"Static {self.member_kind} '{member_name}' does not exist on class '{target_name}'"
        super().__init__(message)


class PropertyNotFoundError(MemberNotFoundError):
    """Raised when a property cannot be read or written through an x-ray."""

    member_kind: ClassVar[str] = "property"


class MethodNotFoundError(MemberNotFoundError):
    """Raised when a method cannot be invoked through an x-ray."""

    member_kind: ClassVar[str] = "method"


class MethodInvocationError(XRayError):
    """Raised when a resolved method handle cannot be bound to its target."""

    member_name: str
    target_name: str

    def __init__(self, member_name: str, target_name: str, is_static: bool = False) -> None:
        """Initialize an invocation failure.

        :param member_name: Method name.
        :param target_name: Name of the concrete target class.
        :param is_static: Whether the call went through a static x-ray.
        """
        self.member_name = member_name
        self.target_name = target_name
        message: str = f'Method "{member_name}" could not be invoked on instance of class "{target_name}"'
        if is_static is True:
            message = f"Static method '{member_name}' could not be invoked on class '{target_name}'"
        super().__init__(message)
