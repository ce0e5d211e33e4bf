"""Tests for the static x-ray."""

import pytest

from tests.fixtures.call_tracker import CallTracker
from tests.fixtures.xray_targets import INT_ARG
from tests.fixtures.xray_targets import STRING_ARG
from tests.fixtures.xray_targets import Empty
from tests.fixtures.xray_targets import PlainBase
from tests.fixtures.xray_targets import PlainChild
from tests.fixtures.xray_targets import StaticTarget
from xray_proxy import MemberNotFoundError
from xray_proxy import MethodInvocationError
from xray_proxy import MethodNotFoundError
from xray_proxy import PropertyNotFoundError
from xray_proxy import StaticXRay
from xray_proxy import XRayResolutionError
from xray_proxy import static_xray

TARGET_NAME: str = "tests.fixtures.xray_targets:StaticTarget"
EMPTY_NAME: str = "tests.fixtures.xray_targets:Empty"


@pytest.fixture(autouse=True)
def static_tracker() -> CallTracker:
    """Restore the target's class state before each test.

    :returns: Tracker installed on the target class.
    """
    tracker: CallTracker = CallTracker()
    StaticTarget.reset_static_state(tracker)
    return tracker


@pytest.fixture
def target_xray() -> StaticXRay:
    """Create a static x-ray of the target class.

    :returns: Static x-ray addressed by module path.
    """
    return StaticXRay(TARGET_NAME)


def test_class_name_is_reported_as_given(target_xray: StaticXRay) -> None:
    """The class name accessor returns the name passed at construction."""
    assert target_xray.class_name() == TARGET_NAME
    assert repr(target_xray) == f"StaticXRay({TARGET_NAME!r})"


def test_factory_builds_static_xray() -> None:
    """``static_xray()`` wraps its argument like the constructor does."""
    wrapper: StaticXRay = static_xray(TARGET_NAME)
    assert isinstance(wrapper, StaticXRay) is True
    assert wrapper.public_static_value == "public-static-property"


def test_dotted_target_name() -> None:
    """Dotted names without a colon resolve too."""
    wrapper: StaticXRay = StaticXRay("tests.fixtures.xray_targets.StaticTarget")
    assert wrapper.class_name() == "tests.fixtures.xray_targets.StaticTarget"
    assert wrapper.__private_static_value == "private-static-property"


def test_class_object_target() -> None:
    """A class object is accepted and named by module path."""
    wrapper: StaticXRay = StaticXRay(StaticTarget)
    assert wrapper.class_name() == TARGET_NAME
    assert wrapper.public_static_method() == "public-static-method"


def test_builtin_class_name() -> None:
    """Bare names resolve against the builtin classes."""
    wrapper: StaticXRay = StaticXRay("dict")
    assert wrapper.is_public_static_method("fromkeys") is True
    assert wrapper.invoke_method("fromkeys", ["a", "b"], 0) == {"a": 0, "b": 0}


@pytest.mark.parametrize(
    "target_name",
    ["NoSuchType", "non-existent-class", "no_such_module_for_xray:Thing", "tests.fixtures.xray_targets:Missing"],
)
def test_unresolvable_class_name(target_name: str) -> None:
    """Names that do not resolve fail at construction."""
    with pytest.raises(XRayResolutionError, match=f"The class '{target_name}' does not exist") as raised:
        StaticXRay(target_name)
    assert raised.value.target_name == target_name
    assert raised.value.__cause__ is not None


def test_non_class_target_name() -> None:
    """Names that resolve to something other than a class are rejected."""
    with pytest.raises(XRayResolutionError, match="does not exist"):
        StaticXRay("tests.fixtures.xray_targets:STRING_ARG")


def test_non_string_target() -> None:
    """Targets that are neither names nor classes are rejected."""
    with pytest.raises(TypeError, match="target must be a class name or a class"):
        StaticXRay(42)  # type: ignore[arg-type]


def test_public_static_property(target_xray: StaticXRay) -> None:
    """Read and write a public class variable."""
    assert target_xray.is_public_static_property("public_static_value") is True
    assert target_xray.is_x_rayed_static_property("public_static_value") is False
    assert target_xray.public_static_value == "public-static-property"

    target_xray.public_static_value = STRING_ARG
    assert target_xray.get_property("public_static_value") == STRING_ARG
    assert StaticTarget.public_static_value == STRING_ARG


def test_x_rayed_private_static_property(target_xray: StaticXRay) -> None:
    """Read and write a private class variable under its mangled name."""
    assert target_xray.is_public_static_property("__private_static_value") is False
    assert target_xray.is_x_rayed_static_property("__private_static_value") is True
    assert target_xray.__private_static_value == "private-static-property"

    target_xray.__private_static_value = STRING_ARG
    assert target_xray.__private_static_value == STRING_ARG
    assert StaticTarget._StaticTarget__private_static_value == STRING_ARG  # type: ignore[attr-defined]


def test_x_rayed_protected_static_property(target_xray: StaticXRay) -> None:
    """Read and write a protected class variable."""
    assert target_xray.is_x_rayed_static_property("_protected_static_value") is True
    target_xray.set_property("_protected_static_value", STRING_ARG)
    assert StaticTarget._protected_static_value == STRING_ARG


def test_class_variable_holding_an_object(target_xray: StaticXRay, static_tracker: CallTracker) -> None:
    """Class variables holding arbitrary objects are static properties."""
    assert target_xray.is_public_static_property("call_tracker") is True
    assert target_xray.call_tracker is static_tracker


@pytest.mark.parametrize("property_name", ["public_value", "tag", "__private_value"])
def test_instance_fields_are_not_static_properties(target_xray: StaticXRay, property_name: str) -> None:
    """Annotated instance fields and instance attributes are not static properties."""
    assert target_xray.is_public_static_property(property_name) is False
    assert target_xray.is_x_rayed_static_property(property_name) is False
    with pytest.raises(PropertyNotFoundError):
        target_xray.get_property(property_name)


def test_methods_are_not_static_properties(target_xray: StaticXRay) -> None:
    """Static methods are not class variables."""
    assert target_xray.is_public_static_property("public_static_method") is False
    assert target_xray.is_x_rayed_static_property("__private_static_method") is False


def test_inherited_static_property_is_not_resolved(target_xray: StaticXRay) -> None:
    """Only class variables declared on the named class are resolved."""
    assert target_xray.is_public_static_property("base_public_static_value") is False
    expected: str = f"Static property 'base_public_static_value' does not exist on class '{TARGET_NAME}'"
    with pytest.raises(PropertyNotFoundError, match=expected):
        target_xray.get_property("base_public_static_value")


def test_declaring_class_resolves_its_own_static_property() -> None:
    """The class that declares a class variable resolves it."""
    assert StaticXRay(PlainBase).shared_count == 0
    assert StaticXRay(PlainChild).is_public_static_property("shared_count") is False


def test_set_non_existent_static_property(target_xray: StaticXRay) -> None:
    """Writing an unknown class variable fails; there is no set-miss handler for classes."""
    expected: str = f"Static property 'non_existent_property' does not exist on class '{TARGET_NAME}'"
    with pytest.raises(PropertyNotFoundError, match=expected):
        target_xray.non_existent_property = STRING_ARG
    assert "non_existent_property" not in vars(StaticTarget)


def test_public_static_method(target_xray: StaticXRay, static_tracker: CallTracker) -> None:
    """Call a public static method."""
    assert target_xray.is_public_static_method("public_static_method") is True
    assert target_xray.is_x_rayed_static_method("public_static_method") is False
    assert target_xray.public_static_method() == "public-static-method"
    assert static_tracker.call_count("public_static_method") == 1


def test_public_static_method_with_args(target_xray: StaticXRay, static_tracker: CallTracker) -> None:
    """Arguments reach a public static method unchanged."""
    assert target_xray.public_static_method_with_args(STRING_ARG, INT_ARG) == f"{STRING_ARG} {INT_ARG}"
    assert static_tracker.call_count() == 1


def test_x_rayed_private_static_method(target_xray: StaticXRay, static_tracker: CallTracker) -> None:
    """Call a private static method."""
    assert target_xray.is_public_static_method("__private_static_method") is False
    assert target_xray.is_x_rayed_static_method("__private_static_method") is True
    assert target_xray.__private_static_method() == "private-static-method"
    assert static_tracker.call_count("__private_static_method") == 1


def test_x_rayed_private_static_method_with_args(target_xray: StaticXRay, static_tracker: CallTracker) -> None:
    """Arguments reach a private static method unchanged."""
    result: object = target_xray.invoke_method("__private_static_method_with_args", STRING_ARG, arg2=INT_ARG)
    assert result == f"{STRING_ARG} {INT_ARG}"
    assert static_tracker.call_count() == 1


def test_x_rayed_private_class_method(target_xray: StaticXRay, static_tracker: CallTracker) -> None:
    """Private class methods are bound to the named class."""
    assert target_xray.is_x_rayed_static_method("__private_class_method") is True
    assert target_xray.__private_class_method() == "private-class-method of StaticTarget"
    assert static_tracker.call_count() == 1


def test_x_rayed_protected_static_method_returns_none(target_xray: StaticXRay, static_tracker: CallTracker) -> None:
    """A static method without a result returns ``None``."""
    assert target_xray.is_x_rayed_static_method("_protected_static_method") is True
    assert target_xray._protected_static_method() is None
    assert static_tracker.call_count("_protected_static_method") == 1


def test_public_class_method(target_xray: StaticXRay) -> None:
    """Public class methods are static methods too."""
    assert target_xray.is_public_static_method("reset_static_state") is True


@pytest.mark.parametrize("method_name", ["public_method", "__private_method", "_call_missing"])
def test_instance_methods_are_not_static_methods(target_xray: StaticXRay, method_name: str) -> None:
    """Instance methods are not reachable; the static call-miss handler decides instead."""
    assert target_xray.is_public_static_method(method_name) is False
    assert target_xray.is_x_rayed_static_method(method_name) is False
    with pytest.raises(AttributeError, match=f"Non-existent static magic method {method_name}"):
        target_xray.invoke_method(method_name)


def test_inherited_static_method_is_not_resolved(target_xray: StaticXRay) -> None:
    """Only static methods declared on the named class are resolved."""
    assert target_xray.is_public_static_method("base_public_static_method") is False
    with pytest.raises(AttributeError, match="Non-existent static magic method base_public_static_method"):
        target_xray.base_public_static_method()


def test_invocation_failure_wraps_binding_error(target_xray: StaticXRay) -> None:
    """A static method that cannot be bound raises ``MethodInvocationError`` chained from the cause."""
    assert target_xray.is_x_rayed_static_method("__private_static_method_that_throws") is True
    expected: str = f"Static method '__private_static_method_that_throws' could not be invoked on class '{TARGET_NAME}'"
    with pytest.raises(MethodInvocationError, match=expected) as raised:
        target_xray.__private_static_method_that_throws()
    assert isinstance(raised.value.__cause__, RuntimeError) is True


def test_static_magic_method(target_xray: StaticXRay, static_tracker: CallTracker) -> None:
    """Undeclared static methods are invoked through the static call-miss handler."""
    assert target_xray.is_public_static_method("static_magic_method") is False
    assert target_xray.is_x_rayed_static_method("static_magic_method") is False
    assert target_xray.static_magic_method() == "magic-method"
    assert target_xray.static_magic_method_with_args(STRING_ARG, INT_ARG) == f"{STRING_ARG} {INT_ARG}"
    assert static_tracker.call_count() == 2


def test_static_magic_handler_is_not_a_property_handler(target_xray: StaticXRay) -> None:
    """Static property reads never reach the static call-miss handler."""
    with pytest.raises(PropertyNotFoundError):
        target_xray.get_property("static_magic_method")


def test_non_existent_static_method() -> None:
    """Invoking an unknown static method on a class without handlers names the method and the class."""
    wrapper: StaticXRay = StaticXRay(EMPTY_NAME)
    assert wrapper.is_public_static_method("non_existent_method") is False
    assert wrapper.is_x_rayed_static_method("non_existent_method") is False
    expected: str = f"Static method 'non_existent_method' does not exist on class '{EMPTY_NAME}'"
    with pytest.raises(MethodNotFoundError, match=expected) as raised:
        wrapper.invoke_method("non_existent_method")
    assert raised.value.member_name == "non_existent_method"
    assert raised.value.target_name == EMPTY_NAME


def test_non_existent_static_property() -> None:
    """Reading an unknown class variable on a class without handlers names the property and the class."""
    wrapper: StaticXRay = StaticXRay(Empty)
    expected: str = f"Static property 'non_existent_property' does not exist on class '{EMPTY_NAME}'"
    with pytest.raises(PropertyNotFoundError, match=expected):
        wrapper.get_property("non_existent_property")


def test_attribute_syntax_for_unknown_static_member() -> None:
    """Unknown attributes raise an ``AttributeError`` subclass naming the class."""
    wrapper: StaticXRay = StaticXRay(EMPTY_NAME)
    expected: str = f"Static property 'missing' does not exist on class '{EMPTY_NAME}'"
    with pytest.raises(PropertyNotFoundError, match=expected) as raised:
        _ = wrapper.missing
    assert isinstance(raised.value, MemberNotFoundError) is True
    assert hasattr(wrapper, "missing") is False


def test_subclass_static_members() -> None:
    """Static and class methods of a subclass resolve; those of its base do not."""
    wrapper: StaticXRay = StaticXRay(PlainChild)
    assert wrapper.is_x_rayed_static_method("_helper") is True
    assert wrapper._helper() == "plain-child-helper"
    assert isinstance(wrapper._factory(), PlainChild) is True
    assert wrapper.is_x_rayed_static_method("_finish") is False

    expected: str = "Static method '_base_helper' does not exist on class 'tests.fixtures.xray_targets:PlainChild'"
    with pytest.raises(MethodNotFoundError, match=expected):
        wrapper.invoke_method("_base_helper")
