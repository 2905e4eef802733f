# python
"""
Tokenizer behavioral tests.

Scope
- Validate classification of raw strings: long switches, joined values, short clusters,
  end-of-options, positional versus bare words.
- Validate value pulling (take_value) and the hand-off of unread strings (remaining).
- Validate malformed switch detection.

Conventions
- Test method names follow CamelCase per project convention.
- Token indexes are 1-based positions in argv.
"""

import unittest
from unittest import TestCase

from argot import Flag, Option, Spec, MalformedTokenError, FaultCode
from argot.tokens import Token, TokenKind, Tokenizer


def _spec():
    return Spec("prog", Flag("-a"), Flag("-b"), Flag("-c"), Option("-n", "--number"))


def _kinds(tokens):
    return [token.kind for token in tokens]


class TestTokenizer(TestCase):
    """Classification of raw strings."""

    def testLongFlag(self):
        tokens = list(Tokenizer(_spec(), ["--number"]))
        self.assertEqual(tokens, [Token(TokenKind.LONG_FLAG, "--number", "--number", index=1)])

    def testLongJoinedValue(self):
        token, = Tokenizer(_spec(), ["--number=5"])
        self.assertEqual(token.kind, TokenKind.VALUE_JOINED)
        self.assertEqual((token.name, token.value), ("--number", "5"))

    def testLongJoinedValueSplitsAtFirstEquals(self):
        token, = Tokenizer(_spec(), ["--number=a=b"])
        self.assertEqual(token.value, "a=b")

    def testLongJoinedEmptyValue(self):
        token, = Tokenizer(_spec(), ["--number="])
        self.assertEqual(token.kind, TokenKind.VALUE_JOINED)
        self.assertEqual(token.value, "")

    def testShortCluster(self):
        tokens = list(Tokenizer(_spec(), ["-abc"]))
        self.assertEqual(_kinds(tokens), [TokenKind.SHORT_FLAG] * 3)
        self.assertEqual([token.name for token in tokens], ["-a", "-b", "-c"])
        self.assertEqual({token.index for token in tokens}, {1})

    def testShortClusterRemainderIsValue(self):
        tokens = list(Tokenizer(_spec(), ["-an5"]))
        self.assertEqual(_kinds(tokens), [TokenKind.SHORT_FLAG, TokenKind.VALUE_JOINED])
        self.assertEqual((tokens[1].name, tokens[1].value), ("-n", "5"))

    def testShortJoinedValueDropsEquals(self):
        token, = Tokenizer(_spec(), ["-n=5"])
        self.assertEqual(token.value, "5")

    def testShortValueOptionLastInCluster(self):
        tokens = list(Tokenizer(_spec(), ["-an"]))
        self.assertEqual(_kinds(tokens), [TokenKind.SHORT_FLAG, TokenKind.SHORT_FLAG])

    def testUnknownShortPassesThrough(self):
        token, = Tokenizer(_spec(), ["-z"])
        self.assertEqual((token.kind, token.name), (TokenKind.SHORT_FLAG, "-z"))

    def testEndOfOptions(self):
        tokens = list(Tokenizer(_spec(), ["--", "-a", "--number"], expecting=lambda: True))
        self.assertEqual(_kinds(tokens), [TokenKind.END_OF_OPTIONS, TokenKind.POSITIONAL, TokenKind.POSITIONAL])
        self.assertEqual(tokens[1].value, "-a")

    def testSingleDashIsPlain(self):
        token, = Tokenizer(_spec(), ["-"], expecting=lambda: True)
        self.assertEqual((token.kind, token.value), (TokenKind.POSITIONAL, "-"))

    def testBareWhenNotExpecting(self):
        token, = Tokenizer(_spec(), ["build"])
        self.assertEqual(token.kind, TokenKind.BARE)

    def testIndexesFollowArgv(self):
        tokens = list(Tokenizer(_spec(), ["-a", "x", "--number=1"], index=3))
        self.assertEqual([token.index for token in tokens], [3, 4, 5])

    def testMalformedLong(self):
        for raw in ("--=x", "--a_b", "---x", "--a--b"):
            with self.subTest(raw=raw), self.assertRaises(MalformedTokenError) as context:
                list(Tokenizer(_spec(), [raw]))
            self.assertEqual(context.exception.code, FaultCode.MALFORMED_TOKEN)
            self.assertEqual(context.exception.input, raw)

    def testMalformedShort(self):
        with self.assertRaises(MalformedTokenError) as context:
            list(Tokenizer(_spec(), ["-a!"]))
        self.assertEqual(context.exception.index, 1)


class TestTokenizerValues(TestCase):
    """take_value and remaining."""

    def testTakeValue(self):
        tokens = Tokenizer(_spec(), ["--number", "5", "-a"])
        next(tokens)
        value = tokens.take_value()
        self.assertEqual((value.kind, value.value, value.index), (TokenKind.POSITIONAL, "5", 2))
        self.assertIsNone(tokens.take_value())

    def testTakeValueStopsAtEndOfOptions(self):
        tokens = Tokenizer(_spec(), ["--number", "--"])
        next(tokens)
        self.assertIsNone(tokens.take_value())

    def testTakeValueAcceptsSingleDash(self):
        tokens = Tokenizer(_spec(), ["--number", "-"])
        next(tokens)
        self.assertEqual(tokens.take_value().value, "-")

    def testTakeValueExhausted(self):
        tokens = Tokenizer(_spec(), ["--number"])
        next(tokens)
        self.assertIsNone(tokens.take_value())

    def testRemaining(self):
        tokens = Tokenizer(_spec(), ["build", "--target=x", "y"])
        next(tokens)
        self.assertEqual(tokens.remaining(), (["--target=x", "y"], 2))
        self.assertEqual(list(tokens), [])


if __name__ == "__main__":
    unittest.main()
