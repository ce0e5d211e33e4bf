"""Member classification for x-ray wrappers."""

import functools
import inspect
import logging
import pkgutil
import sys
import types
import typing
from collections.abc import Callable
from typing import ClassVar
from typing import Literal

from xray_proxy.errors import XRayResolutionError

if sys.version_info >= (3, 14):
    import annotationlib

_LOGGER: logging.Logger = logging.getLogger(__name__)
_MISSING: object = object()
_CLASS_VAR_PREFIXES: tuple[str, ...] = ("ClassVar", "typing.ClassVar", "t.ClassVar")
_STATIC_METHOD_TYPES: tuple[type, ...] = (staticmethod, classmethod, types.ClassMethodDescriptorType)
Accessibility = Literal["public", "x_rayed", "unresolvable"]
MemberKind = Literal["method", "property"]
PUBLIC: Accessibility = "public"
X_RAYED: Accessibility = "x_rayed"
UNRESOLVABLE: Accessibility = "unresolvable"


def is_dunder_name(name: str) -> bool:
    """Report whether ``name`` is a ``__special__`` protocol name.

    :param name: Member name.
    :returns: ``True`` for dunder names.
    """
    if len(name) <= 4:
        return False
    return name.startswith("__") and name.endswith("__")


def is_private_name(name: str) -> bool:
    """Report whether ``name`` is subject to class-private name mangling.

    :param name: Member name.
    :returns: ``True`` when ``name`` starts with ``__`` and does not end with ``__``.
    """
    return name.startswith("__") and name.endswith("__") is False


def is_restricted_name(name: str) -> bool:
    """Report whether ``name`` is non-public by naming convention.

    :param name: Member name.
    :returns: ``True`` for ``_protected`` and ``__private`` names.
    """
    if is_dunder_name(name) is True:
        return False
    return name.startswith("_")


def mangle_name(owner: type, name: str) -> str:
    """Return the key under which ``owner`` stores member ``name``.

    :param owner: Declaring class.
    :param name: Member name as spelled by the caller.
    :returns: Mangled key for private names, ``name`` otherwise.
    """
    if is_private_name(name) is False:
        return name
    stripped_owner: str = owner.__name__.lstrip("_")
    if len(stripped_owner) == 0:
        return name
    return f"_{stripped_owner}{name}"


def _is_class_var(annotation: object) -> bool:
    """Report whether an annotation declares a class variable.

    :param annotation: Evaluated annotation, string, or forward reference.
    :returns: ``True`` for ``ClassVar`` annotations.
    """
    if annotation is ClassVar:
        return True
    if typing.get_origin(annotation) is ClassVar:
        return True

    text: object = annotation
    forward_arg: object = getattr(annotation, "__forward_arg__", None)
    if isinstance(forward_arg, str) is True:
        text = forward_arg
    if isinstance(text, str) is False:
        return False
    return text.startswith(_CLASS_VAR_PREFIXES)


def _own_annotations(owner: type) -> dict[str, object]:
    """Return annotations declared directly on ``owner`` without evaluating them.

    :param owner: Class to inspect.
    :returns: Mapping of annotated names to annotations.
    """
    if sys.version_info >= (3, 14):
        return annotationlib.get_annotations(owner, format=annotationlib.Format.FORWARDREF)
    return inspect.get_annotations(owner)


def _declares_instance_field(owner: type, key: str) -> bool:
    """Report whether ``owner`` annotates ``key`` as a per-instance field.

    :param owner: Class to inspect.
    :param key: Storage key.
    :returns: ``True`` when ``key`` is annotated and not a ``ClassVar``.
    """
    annotations: dict[str, object] = _own_annotations(owner)
    if key not in annotations:
        return False
    return _is_class_var(annotations[key]) is False


def _declares_class_variable(owner: type, key: str) -> bool:
    """Report whether ``owner`` annotates ``key`` as a ``ClassVar``.

    :param owner: Class to inspect.
    :param key: Storage key.
    :returns: ``True`` when ``key`` carries a ``ClassVar`` annotation.
    """
    annotations: dict[str, object] = _own_annotations(owner)
    if key not in annotations:
        return False
    return _is_class_var(annotations[key])


def _instance_dict(subject: object) -> dict[str, object]:
    """Return the subject's own attribute dictionary, bypassing its hooks.

    :param subject: Wrapped object.
    :returns: Instance ``__dict__`` or an empty mapping for slotted objects.
    """
    try:
        instance_dict: object = object.__getattribute__(subject, "__dict__")
    except AttributeError:
        return {}
    if isinstance(instance_dict, dict) is False:
        return {}
    return instance_dict


class MemberHandle:
    """Accessor for one resolved member, addressed by its storage key."""

    owner: type
    attribute_name: str
    raw: object

    def __init__(self, owner: type, attribute_name: str, raw: object = None) -> None:
        """Initialize a member handle.

        :param owner: Class that declares the member.
        :param attribute_name: Storage key, mangled for private members.
        :param raw: Class-level object found for the key, if any.
        """
        self.owner = owner
        self.attribute_name = attribute_name
        self.raw = raw

    def get(self, target: object) -> object:
        """Read the member from ``target``.

        :param target: Wrapped instance or class.
        :returns: Current member value.
        """
        return getattr(target, self.attribute_name)

    def set(self, target: object, value: object) -> None:
        """Write the member on ``target``.

        :param target: Wrapped instance or class.
        :param value: New value.
        """
        setattr(target, self.attribute_name, value)

    def bind(self, target: object | None, target_type: type) -> Callable[..., object]:
        """Bind the raw member to ``target`` the way attribute lookup would.

        :param target: Wrapped instance, or ``None`` for class-level binding.
        :param target_type: Class used for binding.
        :returns: Callable ready to invoke.
        """
        descriptor_get: object = getattr(type(self.raw), "__get__", None)
        if descriptor_get is None:
            return self.raw  # type: ignore[return-value]
        return descriptor_get(self.raw, target, target_type)  # type: ignore[operator]

    def __repr__(self) -> str:
        """Describe the handle.

        :returns: Declaring class and storage key.
        """
        return f"MemberHandle({self.owner.__qualname__}.{self.attribute_name})"


class Classification:
    """Outcome of classifying one member name."""

    accessibility: Accessibility
    handle: MemberHandle | None

    def __init__(self, accessibility: Accessibility, handle: MemberHandle | None = None) -> None:
        """Initialize a classification.

        :param accessibility: Classification outcome.
        :param handle: Handle for resolvable members.
        """
        self.accessibility = accessibility
        self.handle = handle

    @property
    def is_public(self) -> bool:
        """Report whether the member is public.

        :returns: ``True`` for public members.
        """
        return self.accessibility == PUBLIC

    @property
    def is_x_rayed(self) -> bool:
        """Report whether the member is restricted and reachable.

        :returns: ``True`` for x-rayed members.
        """
        return self.accessibility == X_RAYED

    @property
    def is_resolvable(self) -> bool:
        """Report whether the member exists with the requested kind.

        :returns: ``True`` for public and x-rayed members.
        """
        return self.accessibility != UNRESOLVABLE

    def __repr__(self) -> str:
        """Describe the classification.

        :returns: Outcome and handle.
        """
        return f"Classification({self.accessibility!r}, {self.handle!r})"


UNRESOLVED: Classification = Classification(UNRESOLVABLE)


def _found(owner: type, key: str, name: str, raw: object = None) -> Classification:
    """Build the classification for a member that exists with the right kind.

    :param owner: Declaring class.
    :param key: Storage key.
    :param name: Name as requested by the caller.
    :param raw: Class-level object, if any.
    :returns: Public or x-rayed classification.
    """
    handle: MemberHandle = MemberHandle(owner, key, raw)
    if is_restricted_name(name) is True:
        return Classification(X_RAYED, handle)
    return Classification(PUBLIC, handle)


def _is_property_object(raw: object) -> bool:
    """Report whether a class-level object stores per-instance state.

    :param raw: Object found in a class ``__dict__``.
    :returns: ``True`` for data descriptors and cached properties.
    """
    if isinstance(raw, functools.cached_property) is True:
        return True
    return inspect.isdatadescriptor(raw)


def _is_instance_method_object(raw: object) -> bool:
    """Report whether a class-level object behaves as an instance method.

    :param raw: Object found in a class ``__dict__``.
    :returns: ``True`` for callables that bind to instances.
    """
    if isinstance(raw, (*_STATIC_METHOD_TYPES, type)) is True:
        return False
    if inspect.isdatadescriptor(raw) is True:
        return False
    return callable(raw)


def _is_class_variable_object(raw: object) -> bool:
    """Report whether a class-level object is a plain class variable.

    :param raw: Object found in a class ``__dict__``.
    :returns: ``True`` for values that are not routines or descriptors.
    """
    if isinstance(raw, _STATIC_METHOD_TYPES) is True:
        return False
    if inspect.isroutine(raw) is True:
        return False
    if isinstance(raw, type) is True:
        return True
    return hasattr(type(raw), "__get__") is False


def classify_instance_property(subject: object, name: str) -> Classification:
    """Classify ``name`` as an instance property of ``subject``.

    The MRO is walked nearest-first. Each class contributes its own mangled
    key, so private attributes declared by an ancestor are reachable.
    Plain class-level values serve as instance defaults unless they are
    annotated as ``ClassVar``.

    :param subject: Wrapped object.
    :param name: Requested property name.
    :returns: Classification of the property.
    """
    instance_dict: dict[str, object] = _instance_dict(subject)
    for owner in type(subject).__mro__:
        key: str = mangle_name(owner, name)
        raw: object = owner.__dict__.get(key, _MISSING)
        if raw is not _MISSING and _is_property_object(raw) is True:
            return _found(owner, key, name, raw)
        if key in instance_dict:
            return _found(owner, key, name)
        if _declares_instance_field(owner, key) is True:
            return _found(owner, key, name)
        if raw is not _MISSING and _is_class_variable_object(raw) is True:
            if _declares_class_variable(owner, key) is True:
                return UNRESOLVED
            return _found(owner, key, name, raw)
        if raw is not _MISSING:
            return UNRESOLVED
    return UNRESOLVED


def classify_instance_method(subject: object, name: str) -> Classification:
    """Classify ``name`` as an instance method of ``subject``.

    Only the member that ordinary lookup on the concrete class reaches is
    considered; private names are mangled with the concrete class name.

    :param subject: Wrapped object.
    :param name: Requested method name.
    :returns: Classification of the method.
    """
    subject_type: type = type(subject)
    key: str = mangle_name(subject_type, name)
    for owner in subject_type.__mro__:
        raw: object = owner.__dict__.get(key, _MISSING)
        if raw is _MISSING:
            continue
        if _is_instance_method_object(raw) is False:
            return UNRESOLVED
        return _found(owner, key, name, raw)
    return UNRESOLVED


def classify_static_property(target_class: type, name: str) -> Classification:
    """Classify ``name`` as a class variable declared directly on ``target_class``.

    :param target_class: Wrapped class.
    :param name: Requested property name.
    :returns: Classification of the class variable.
    """
    key: str = mangle_name(target_class, name)
    raw: object = target_class.__dict__.get(key, _MISSING)
    if raw is _MISSING:
        return UNRESOLVED
    if _is_class_variable_object(raw) is False:
        return UNRESOLVED
    if _declares_instance_field(target_class, key) is True:
        return UNRESOLVED
    return _found(target_class, key, name, raw)


def classify_static_method(target_class: type, name: str) -> Classification:
    """Classify ``name`` as a static or class method declared directly on ``target_class``.

    :param target_class: Wrapped class.
    :param name: Requested method name.
    :returns: Classification of the method.
    """
    key: str = mangle_name(target_class, name)
    raw: object = target_class.__dict__.get(key, _MISSING)
    if isinstance(raw, _STATIC_METHOD_TYPES) is False:
        return UNRESOLVED
    return _found(target_class, key, name, raw)


class ClassificationCache:
    """Per-wrapper memo of member classifications, one table per member kind."""

    _target_name: str
    _methods: dict[str, Classification]
    _properties: dict[str, Classification]

    def __init__(self, target_name: str) -> None:
        """Initialize empty classification tables.

        :param target_name: Target class name used in log records.
        """
        self._target_name = target_name
        self._methods = {}
        self._properties = {}

    def resolve(
        self,
        kind: MemberKind,
        name: str,
        classifier: Callable[[str], Classification],
    ) -> Classification:
        """Return the cached classification, classifying on first use.

        :param kind: Member kind table to use.
        :param name: Member name.
        :param classifier: Callable that classifies an uncached name.
        :returns: Classification for ``name``.
        """
        table: dict[str, Classification] = self._methods
        if kind == "property":
            table = self._properties

        cached: Classification | None = table.get(name)
        if cached is not None:
            return cached

        classification: Classification = classifier(name)
        table[name] = classification
        _LOGGER.debug(
            "Classified %s %r on %s as %s",
            kind,
            name,
            self._target_name,
            classification.accessibility,
        )
        return classification

    def __len__(self) -> int:
        """Count cached classifications.

        :returns: Number of cached entries across both tables.
        """
        return len(self._methods) + len(self._properties)


def resolve_static_target(target: str) -> type:
    """Resolve a class from ``module.path:QualName``, dotted, or builtin notation.

    :param target: Class name as supplied by the caller.
    :returns: Resolved class.
    :raises XRayResolutionError: If no class can be found for ``target``.
    """
    resolved: object
    try:
        if ":" in target or "." in target:
            resolved = pkgutil.resolve_name(target)
        else:
            resolved = pkgutil.resolve_name(f"builtins:{target}")
    except (ImportError, AttributeError, ValueError) as err:
        _LOGGER.debug("Could not resolve static x-ray target %r: %s", target, err)
        raise XRayResolutionError(target) from err

    if isinstance(resolved, type) is False:
        _LOGGER.debug("Static x-ray target %r resolved to non-class %r", target, resolved)
        raise XRayResolutionError(target)

    _LOGGER.debug("Resolved static x-ray target %r to %r", target, resolved)
    return resolved
