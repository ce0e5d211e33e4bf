"""X-ray wrappers that expose restricted members of objects and classes."""

import logging
from collections.abc import Callable
from typing import ClassVar

from xray_proxy import overflow
from xray_proxy.errors import MethodInvocationError
from xray_proxy.errors import MethodNotFoundError
from xray_proxy.errors import PropertyNotFoundError
from xray_proxy.overflow import CALL_MISSING_SLOT
from xray_proxy.overflow import CALL_STATIC_MISSING_SLOT
from xray_proxy.overflow import GET_MISSING_SLOT
from xray_proxy.overflow import SET_MISSING_SLOT
from xray_proxy.overflow import OverflowSlot
from xray_proxy.resolution import PUBLIC
from xray_proxy.resolution import X_RAYED
from xray_proxy.resolution import Classification
from xray_proxy.resolution import ClassificationCache
from xray_proxy.resolution import MemberHandle
from xray_proxy.resolution import classify_instance_method
from xray_proxy.resolution import classify_instance_property
from xray_proxy.resolution import classify_static_method
from xray_proxy.resolution import classify_static_property
from xray_proxy.resolution import resolve_static_target

_LOGGER: logging.Logger = logging.getLogger(__name__)
_INTERNAL_ATTRIBUTES: frozenset[str] = frozenset(
    {"_xray_target", "_xray_target_type", "_xray_target_name", "_xray_cache"}
)


class _MethodInvoker:
    """Call wrapper for methods reached through x-ray attribute access."""

    _xray: "_XRayOps"
    _method_name: str

    def __init__(self, xray: "_XRayOps", method_name: str) -> None:
        """Initialize a method invoker.

        :param xray: Owning x-ray wrapper.
        :param method_name: Method name as requested by the caller.
        """
        self._xray = xray
        self._method_name = method_name

    def __call__(self, *args: object, **kwargs: object) -> object:
        """Invoke the method through the owning x-ray.

        :param args: Positional arguments.
        :param kwargs: Keyword arguments.
        :returns: The method's return value.
        """
        return self._xray.invoke_method(self._method_name, *args, **kwargs)

    def __repr__(self) -> str:
        """Describe the invoker.

        :returns: Method name and owning x-ray.
        """
        return f"<x-rayed method {self._method_name!r} of {self._xray!r}>"


class _XRayOps:
    """Shared classification and dispatch for x-ray wrappers."""

    _is_static: ClassVar[bool] = False
    _get_slot: ClassVar[OverflowSlot | None] = None
    _set_slot: ClassVar[OverflowSlot | None] = None
    _call_slot: ClassVar[OverflowSlot | None] = None

    _xray_target: object
    _xray_target_type: type
    _xray_target_name: str
    _xray_cache: ClassificationCache

    def _bind_target(self, target: object, target_type: type, target_name: str) -> None:
        """Attach the wrapped target and a fresh classification cache.

        :param target: Wrapped instance or class.
        :param target_type: Class whose members are classified.
        :param target_name: Class name used in error messages.
        """
        object.__setattr__(self, "_xray_target", target)
        object.__setattr__(self, "_xray_target_type", target_type)
        object.__setattr__(self, "_xray_target_name", target_name)
        object.__setattr__(self, "_xray_cache", ClassificationCache(target_name))

    def _classify_method_uncached(self, name: str) -> Classification:
        """Classify a method name without consulting the cache.

        Each wrapper variant implements its own member rules here.

        :param name: Method name.
        :returns: Fresh classification.
        :raises NotImplementedError: If the wrapper variant does not override it.
        """
        raise NotImplementedError

    def _classify_property_uncached(self, name: str) -> Classification:
        """Classify a property name without consulting the cache.

        Each wrapper variant implements its own member rules here.

        :param name: Property name.
        :returns: Fresh classification.
        :raises NotImplementedError: If the wrapper variant does not override it.
        """
        raise NotImplementedError

    def _classify_method(self, name: str) -> Classification:
        """Classify a method name, once per wrapper.

        :param name: Method name.
        :returns: Cached classification.
        """
        return self._xray_cache.resolve("method", name, self._classify_method_uncached)

    def _classify_property(self, name: str) -> Classification:
        """Classify a property name, once per wrapper.

        :param name: Property name.
        :returns: Cached classification.
        """
        return self._xray_cache.resolve("property", name, self._classify_property_uncached)

    def _bind_method(self, name: str, handle: MemberHandle) -> Callable[..., object]:
        """Bind an x-rayed method handle to the target.

        :param name: Method name as requested by the caller.
        :param handle: Resolved method handle.
        :returns: Callable bound the way attribute lookup would bind it.
        :raises MethodInvocationError: If binding the handle fails.
        """
        binding_target: object | None = self._xray_target
        if self._is_static is True:
            binding_target = None
        try:
            return handle.bind(binding_target, self._xray_target_type)
        except Exception as err:
            raise MethodInvocationError(name, self._xray_target_name, is_static=self._is_static) from err

    def get_property(self, name: str) -> object:
        """Read a property of the x-rayed target.

        :param name: Property name. It is case-sensitive.
        :returns: The property value.
        :raises PropertyNotFoundError: If the property does not exist and no get-miss handler is declared.
        """
        classification: Classification = self._classify_property(name)
        if classification.accessibility == PUBLIC:
            return getattr(self._xray_target, name)
        if classification.accessibility == X_RAYED and classification.handle is not None:
            return classification.handle.get(self._xray_target)

        handler: Callable[..., object] | None = overflow.find_overflow_handler(
            self._xray_target,
            self._xray_target_type,
            self._get_slot,
        )
        if handler is not None:
            return overflow.delegate_get(handler, name)
        raise PropertyNotFoundError(name, self._xray_target_name, is_static=self._is_static)

    def set_property(self, name: str, value: object) -> None:
        """Write a property of the x-rayed target.

        :param name: Property name. It is case-sensitive.
        :param value: Value to write.
        :raises PropertyNotFoundError: If the property does not exist and no set-miss handler is declared.
        """
        classification: Classification = self._classify_property(name)
        if classification.accessibility == PUBLIC:
            setattr(self._xray_target, name, value)
            return
        if classification.accessibility == X_RAYED and classification.handle is not None:
            classification.handle.set(self._xray_target, value)
            return

        handler: Callable[..., object] | None = overflow.find_overflow_handler(
            self._xray_target,
            self._xray_target_type,
            self._set_slot,
        )
        if handler is not None:
            overflow.delegate_set(handler, name, value)
            return
        raise PropertyNotFoundError(name, self._xray_target_name, is_static=self._is_static)

    def invoke_method(self, name: str, /, *args: object, **kwargs: object) -> object:
        """Invoke a method of the x-rayed target.

        Arguments are forwarded exactly as given, so mutations of mutable
        arguments are visible to the caller.

        :param name: Method name. It is case-sensitive.
        :param args: Positional arguments.
        :param kwargs: Keyword arguments.
        :returns: The method's return value.
        :raises MethodNotFoundError: If the method does not exist and no call-miss handler is declared.
        :raises MethodInvocationError: If an x-rayed method cannot be bound to the target.
        """
        classification: Classification = self._classify_method(name)
        if classification.accessibility == PUBLIC:
            public_method: Callable[..., object] = getattr(self._xray_target, name)
            return public_method(*args, **kwargs)
        if classification.accessibility == X_RAYED and classification.handle is not None:
            x_rayed_method: Callable[..., object] = self._bind_method(name, classification.handle)
            return x_rayed_method(*args, **kwargs)

        handler: Callable[..., object] | None = overflow.find_overflow_handler(
            self._xray_target,
            self._xray_target_type,
            self._call_slot,
        )
        if handler is not None:
            return overflow.delegate_call(handler, name, args, kwargs)
        raise MethodNotFoundError(name, self._xray_target_name, is_static=self._is_static)

    def _get_overflow_attribute(self, name: str) -> object:
        """Resolve an undeclared attribute through the target's overflow handlers.

        A get-miss handler answers first; when it raises ``AttributeError`` and a
        call-miss handler is declared, the name is treated as a method.

        :param name: Attribute name.
        :returns: Handler value or a method invoker.
        :raises PropertyNotFoundError: If no overflow handler is declared.
        """
        get_handler: Callable[..., object] | None = overflow.find_overflow_handler(
            self._xray_target,
            self._xray_target_type,
            self._get_slot,
        )
        has_call_handler: bool = overflow.has_overflow_handler(self._xray_target_type, self._call_slot)
        if get_handler is None:
            if has_call_handler is True:
                return _MethodInvoker(self, name)
            raise PropertyNotFoundError(name, self._xray_target_name, is_static=self._is_static)

        if has_call_handler is False:
            return overflow.delegate_get(get_handler, name)
        try:
            return overflow.delegate_get(get_handler, name)
        except AttributeError:
            _LOGGER.debug("Get-miss handler declined %r; treating it as a method", name)
            return _MethodInvoker(self, name)

    def __getattr__(self, name: str) -> object:
        """Resolve target members through attribute syntax.

        :param name: Attribute name.
        :returns: Property value or a callable for methods.
        """
        if name in _INTERNAL_ATTRIBUTES:
            raise AttributeError(name)

        property_classification: Classification = self._classify_property(name)
        if property_classification.is_resolvable is True:
            return self.get_property(name)

        method_classification: Classification = self._classify_method(name)
        if method_classification.is_resolvable is True:
            return _MethodInvoker(self, name)

        return self._get_overflow_attribute(name)

    def __setattr__(self, name: str, value: object) -> None:
        """Write target properties through attribute syntax.

        :param name: Attribute name.
        :param value: Value to write.
        """
        self.set_property(name, value)


class XRay(_XRayOps):
    """Make visible the inner workings of an object.

    Use the x-ray like the original object, including its ``_protected`` and
    ``__private`` members::

        xray = XRay(counter)
        xray._step = 2
        xray.__reset()

    Private attributes declared by ancestor classes are reachable. Private
    methods declared by ancestors are not, matching ordinary attribute lookup
    on the concrete class. Static and class methods and class variables are
    not instance members; use :class:`StaticXRay` for those.

    Attribute syntax cannot tell a read from a call. When the subject has
    both ``_get_missing`` and ``_call_missing``, ``xray.name`` asks
    ``_get_missing`` first, so ``xray.name()`` calls whatever it returns.
    Use ``xray.invoke_method("name")`` to reach ``_call_missing`` directly.

    Implementation details are private for a reason. Reach for an x-ray in
    tests only.
    """

    _get_slot: ClassVar[OverflowSlot | None] = GET_MISSING_SLOT
    _set_slot: ClassVar[OverflowSlot | None] = SET_MISSING_SLOT
    _call_slot: ClassVar[OverflowSlot | None] = CALL_MISSING_SLOT

    def __init__(self, subject: object) -> None:
        """Initialize a new x-ray for an object.

        :param subject: Object to x-ray.
        """
        subject_type: type = type(subject)
        self._bind_target(subject, subject_type, subject_type.__qualname__)

    def subject(self) -> object:
        """Fetch the object being x-rayed.

        :returns: The subject of the x-ray.
        """
        return self._xray_target

    def _classify_method_uncached(self, name: str) -> Classification:
        """Classify an instance method of the subject.

        :param name: Method name.
        :returns: Fresh classification.
        """
        return classify_instance_method(self._xray_target, name)

    def _classify_property_uncached(self, name: str) -> Classification:
        """Classify an instance property of the subject.

        :param name: Property name.
        :returns: Fresh classification.
        """
        return classify_instance_property(self._xray_target, name)

    def is_public_method(self, name: str) -> bool:
        """Check whether a named method is public.

        :param name: Method name. It is case-sensitive.
        :returns: ``True`` if the method exists, is public and is an instance method.
        """
        return self._classify_method(name).is_public

    def is_x_rayed_method(self, name: str) -> bool:
        """Check whether a named method has been made accessible by the x-ray.

        :param name: Method name. It is case-sensitive.
        :returns: ``True`` if the method exists, is restricted and is an instance method.
        """
        return self._classify_method(name).is_x_rayed

    def is_public_property(self, name: str) -> bool:
        """Check whether a named property is public.

        :param name: Property name. It is case-sensitive.
        :returns: ``True`` if the property exists, is public and is an instance property.
        """
        return self._classify_property(name).is_public

    def is_x_rayed_property(self, name: str) -> bool:
        """Check whether a named property has been made accessible by the x-ray.

        :param name: Property name. It is case-sensitive.
        :returns: ``True`` if the property exists, is restricted and is an instance property.
        """
        return self._classify_property(name).is_x_rayed

    def __repr__(self) -> str:
        """Describe the x-ray.

        :returns: Wrapper name and subject representation.
        """
        return f"XRay({self._xray_target!r})"


class StaticXRay(_XRayOps):
    """Make visible the static inner workings of a class.

    Use the x-ray like an instance whose members are the class's static
    methods, class methods and class variables, restricted ones included::

        xray = StaticXRay("billing.ledger:Ledger")
        xray._registry = {}
        xray.__reset_sequence()

    Only members declared directly on the named class are resolved.
    """

    _is_static: ClassVar[bool] = True
    _call_slot: ClassVar[OverflowSlot | None] = CALL_STATIC_MISSING_SLOT

    def __init__(self, target: str | type) -> None:
        """Initialize a new static x-ray for a named class.

        :param target: Class in ``module.path:QualName`` or dotted form, a builtin class name, or a class.
        :raises XRayResolutionError: If ``target`` names no class.
        :raises TypeError: If ``target`` is neither a string nor a class.
        """
        target_class: type
        class_name: str
        if isinstance(target, type) is True:
            target_class = target  # type: ignore[assignment]
            class_name = f"{target_class.__module__}:{target_class.__qualname__}"
        elif isinstance(target, str) is True:
            target_class = resolve_static_target(target)  # type: ignore[arg-type]
            class_name = target  # type: ignore[assignment]
        else:
            raise TypeError("target must be a class name or a class")
        self._bind_target(target_class, target_class, class_name)

    def class_name(self) -> str:
        """Fetch the name of the class being x-rayed.

        :returns: The class name as supplied at construction.
        """
        return self._xray_target_name

    def _classify_method_uncached(self, name: str) -> Classification:
        """Classify a static or class method of the target class.

        :param name: Method name.
        :returns: Fresh classification.
        """
        return classify_static_method(self._xray_target_type, name)

    def _classify_property_uncached(self, name: str) -> Classification:
        """Classify a class variable of the target class.

        :param name: Class variable name.
        :returns: Fresh classification.
        """
        return classify_static_property(self._xray_target_type, name)

    def is_public_static_method(self, name: str) -> bool:
        """Check whether a named static method is public.

        :param name: Method name. It is case-sensitive.
        :returns: ``True`` if the method is declared on the class, is public and is static or a class method.
        """
        return self._classify_method(name).is_public

    def is_x_rayed_static_method(self, name: str) -> bool:
        """Check whether a named static method has been made accessible by the x-ray.

        :param name: Method name. It is case-sensitive.
        :returns: ``True`` if the method is declared on the class, is restricted and is static or a class method.
        """
        return self._classify_method(name).is_x_rayed

    def is_public_static_property(self, name: str) -> bool:
        """Check whether a named class variable is public.

        :param name: Class variable name. It is case-sensitive.
        :returns: ``True`` if the class variable is declared on the class and is public.
        """
        return self._classify_property(name).is_public

    def is_x_rayed_static_property(self, name: str) -> bool:
        """Check whether a named class variable has been made accessible by the x-ray.

        :param name: Class variable name. It is case-sensitive.
        :returns: ``True`` if the class variable is declared on the class and is restricted.
        """
        return self._classify_property(name).is_x_rayed

    def __repr__(self) -> str:
        """Describe the static x-ray.

        :returns: Wrapper name and class name.
        """
        return f"StaticXRay({self._xray_target_name!r})"
