"""Tests for :mod:`skpool.domain`."""

from unittest import TestCase

from skpool import domain


class TestRedact(TestCase):
    """:func:`.domain.redact` hides session keys."""

    def test_long_key(self):
        """Long keys keep only their head and tail."""
        sk = 'sk-ant-REDACTED'
        preview = domain.redact(sk)
        self.assertNotEqual(preview, sk)
        self.assertEqual(preview, 'sk-ant-s...cdef')

    def test_short_key(self):
        """Keys within the preview window are masked entirely."""
        for sk in ('a', 'sk1', 'x' * 12):
            self.assertEqual(domain.redact(sk), domain.PREVIEW_MASK)

    def test_never_reveals(self):
        """No key longer than the window is shown in full."""
        for length in range(13, 80):
            sk = ''.join(chr(ord('a') + i % 26) for i in range(length))
            self.assertNotEqual(domain.redact(sk), sk)


class TestIsUsable(TestCase):
    """:func:`.domain.is_usable` checks that an SK can be issued."""

    def test_is_usable(self):
        self.assertTrue(domain.is_usable('sk1'))
        self.assertFalse(domain.is_usable(''))
        self.assertFalse(domain.is_usable('  '))
        self.assertFalse(domain.is_usable(None))
        self.assertFalse(domain.is_usable(123))
