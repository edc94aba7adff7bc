"""
Tests for the shared helpers.

This module verifies:
- Singleton identity and falsy semantics of the Unset sentinel.
- coalesce() keeping legitimate falsey values.
- rename() in both function and decorator form.
- mirror() exposing containers as read-only views.
- The Charset character classes and membership checks.
"""
import copy
import unittest
from threading import Lock, Thread
from types import MappingProxyType
from unittest import TestCase

from dialect.utils import *


class UnsetTest(TestCase):
    """
    Test suite for the Unset sentinel.
    """

    def testSingleton(self) -> None:
        """
        The constructor returns the same object reference on every call.
        """
        self.assertIs(UnsetType(), UnsetType())
        self.assertIs(Unset, UnsetType())

    def testRepr(self) -> None:
        self.assertEqual(repr(Unset), "Unset")

    def testFalsely(self) -> None:
        self.assertFalse(bool(Unset))

    def testNotEqualToNoneOrFalse(self) -> None:
        """
        Falsy does not imply equality with other falsy values (None/False).
        """
        self.assertNotEqual(Unset, None)
        self.assertNotEqual(Unset, False)  # noqa: E712

    def testCopyDeepcopyPreserveSingleton(self) -> None:
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)

    def testThreadSafetySingleton(self) -> None:
        """
        Concurrent constructions return the same instance.
        """
        results: list[UnsetType] = []
        lock: Lock = Lock()

        def worker():
            instance = UnsetType()
            with lock:
                results.append(instance)

        threads: list[Thread] = [Thread(target=worker) for _ in range(16)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(len(results), 16)
        for instance in results:
            self.assertIs(instance, Unset)

    def testNoUnionOperator(self) -> None:
        with self.assertRaises(TypeError):
            Unset | None

    def testFinalClass(self) -> None:
        """
        The class is final: attempts to subclass must fail with TypeError.
        """
        with self.assertRaises(TypeError):
            type("UnsetType", (UnsetType,), {})


class CoalesceTest(TestCase):

    def testUnsetFallsBack(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))

    def testFalseyValuesKept(self) -> None:
        for value in (None, 0, "", []):
            with self.subTest(value=value):
                self.assertIs(coalesce(value, "fallback"), value)


class RenameTest(TestCase):

    def testFunctionForm(self) -> None:
        def work():
            pass

        self.assertIs(rename(work, "job"), work)
        self.assertEqual(work.__name__, "job")
        self.assertEqual(work.__qualname__, "job")

    def testDecoratorForm(self) -> None:
        @rename("job")
        def work():
            pass

        self.assertEqual(work.__name__, "job")

    def testRejectsNonCallable(self) -> None:
        with self.assertRaises(TypeError):
            rename(42, "job")

    def testRejectsNonStringName(self) -> None:
        with self.assertRaises(TypeError):
            rename(42)

    def testRejectsTooManyArguments(self) -> None:
        with self.assertRaises(TypeError):
            rename(print, "a", "b")


class MirrorTest(TestCase):

    def setUp(self) -> None:
        class Holder:
            items = mirror("items")
            mapping = mirror("mapping")
            members = mirror("members")
            label = mirror("label")

            def __init__(self):
                self._items = [1, 2]
                self._mapping = {"a": 1}
                self._members = {"x"}
                self._label = "name"

        self.holder = Holder()

    def testSequenceBecomesTuple(self) -> None:
        self.assertEqual(self.holder.items, (1, 2))

    def testMappingBecomesProxy(self) -> None:
        self.assertIsInstance(self.holder.mapping, MappingProxyType)
        with self.assertRaises(TypeError):
            self.holder.mapping["b"] = 2  # type: ignore[index]

    def testSetBecomesFrozenset(self) -> None:
        self.assertEqual(self.holder.members, frozenset({"x"}))

    def testStringKept(self) -> None:
        self.assertEqual(self.holder.label, "name")

    def testPropertyIsReadOnly(self) -> None:
        with self.assertRaises(AttributeError):
            self.holder.items = ()

    def testRejectsNonStringName(self) -> None:
        with self.assertRaises(TypeError):
            mirror(1)


class CharsetTest(TestCase):

    def testDefaults(self) -> None:
        self.assertEqual(CHARSET.whitespace, " \n\r\t")
        self.assertEqual(CHARSET.special, "\n\r\t")
        self.assertEqual(CHARSET.short, "[]{}()-=")
        self.assertEqual(CHARSET.long, "[]{}()=")

    def testFields(self) -> None:
        self.assertEqual(Charset._fields, ("whitespace", "special", "short", "long"))

    def testContains(self) -> None:
        self.assertTrue(CHARSET.contains("a\tb", "special"))
        self.assertFalse(CHARSET.contains("a b", "special"))
        self.assertTrue(CHARSET.contains("a b", "whitespace"))
        self.assertTrue(CHARSET.contains("=", "short"))
        self.assertFalse(CHARSET.contains("-", "long"))

    def testCustomCharset(self) -> None:
        charset = Charset(whitespace=" ")
        self.assertFalse(charset.contains("\t", "whitespace"))
        self.assertEqual(charset.special, CHARSET.special)

    def testImmutable(self) -> None:
        with self.assertRaises(AttributeError):
            CHARSET.whitespace = ""  # type: ignore[misc]


if __name__ == '__main__':
    unittest.main()
