"""Public package API for xray_proxy."""

from xray_proxy.api import static_xray
from xray_proxy.api import xray
from xray_proxy.errors import MemberNotFoundError
from xray_proxy.errors import MethodInvocationError
from xray_proxy.errors import MethodNotFoundError
from xray_proxy.errors import PropertyNotFoundError
from xray_proxy.errors import XRayError
from xray_proxy.errors import XRayResolutionError
from xray_proxy.overflow import CALL_MISSING_SLOT
from xray_proxy.overflow import CALL_STATIC_MISSING_SLOT
from xray_proxy.overflow import GET_MISSING_SLOT
from xray_proxy.overflow import SET_MISSING_SLOT
from xray_proxy.overflow import OverflowSlot
from xray_proxy.resolution import Accessibility
from xray_proxy.resolution import Classification
from xray_proxy.resolution import MemberHandle
from xray_proxy.runtime import StaticXRay
from xray_proxy.runtime import XRay

__all__: list[str] = [
    "static_xray",
    "xray",
    "Accessibility",
    "CALL_MISSING_SLOT",
    "CALL_STATIC_MISSING_SLOT",
    "Classification",
    "GET_MISSING_SLOT",
    "MemberHandle",
    "MemberNotFoundError",
    "MethodInvocationError",
    "MethodNotFoundError",
    "OverflowSlot",
    "PropertyNotFoundError",
    "SET_MISSING_SLOT",
    "StaticXRay",
    "XRay",
    "XRayError",
    "XRayResolutionError",
]
