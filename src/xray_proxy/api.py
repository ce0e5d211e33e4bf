"""User-facing API entrypoints for xray_proxy."""

from xray_proxy.runtime import StaticXRay
from xray_proxy.runtime import XRay


def xray(subject: object) -> XRay:
    """Create an x-ray that exposes the restricted members of an object.

    :param subject: Object to x-ray.
    :returns: Wrapper usable like ``subject``, restricted members included.
    """
    return XRay(subject)


def static_xray(target: str | type) -> StaticXRay:
    """Create an x-ray that exposes the restricted static members of a class.

    :param target: Class in ``module.path:QualName`` or dotted form, a builtin class name, or a class.
    :returns: Wrapper whose members are the class's static members.
    :raises XRayResolutionError: If ``target`` names no class.
    """
    return StaticXRay(target)
