import random
import string

import pytest

from credkit.schema import Charset, CompositionRule, validate

ALNUM = Charset(uppercase=True, lowercase=True, digits=True)


def _expected(value: str, rule: CompositionRule) -> bool:
    if rule.length is not None and len(value) != rule.length:
        return False
    body = value
    if rule.prefix:
        if not value.startswith(rule.prefix):
            return False
        body = value[len(rule.prefix):]
    allowed = ""
    if rule.charset.uppercase:
        allowed += string.ascii_uppercase
    if rule.charset.lowercase:
        allowed += string.ascii_lowercase
    if rule.charset.digits:
        allowed += string.digits
    if rule.charset.symbols:
        allowed += string.punctuation
    return not allowed or all(c in allowed for c in body)


@pytest.mark.parametrize("length,expected", [(9, False), (10, True), (11, False)])
def test_boundary_lengths(length, expected):
    rule = CompositionRule(length=10, charset=Charset(lowercase=True))
    assert validate("a" * length, rule) is expected


def test_prefix_required():
    rule = CompositionRule(prefix="ghp_", charset=ALNUM)
    assert validate("ghp_abc123", rule)
    assert not validate("gho_abc123", rule)
    assert not validate("abc123", rule)


def test_prefix_is_not_checked_against_charset():
    rule = CompositionRule(length=15, prefix="github_pat_", charset=ALNUM)
    assert validate("github_pat_Ab12", rule)
    assert not validate("github_pat_Ab_2", rule)


def test_charset_classes():
    assert validate("ABC", CompositionRule(charset=Charset(uppercase=True)))
    assert not validate("ABc", CompositionRule(charset=Charset(uppercase=True)))
    assert validate("123", CompositionRule(charset=Charset(digits=True)))
    assert not validate("12a", CompositionRule(charset=Charset(digits=True)))
    assert validate("!@#-_", CompositionRule(charset=Charset(symbols=True)))
    assert not validate("a b", CompositionRule(charset=Charset(lowercase=True, symbols=True)))


def test_non_ascii_rejected():
    rule = CompositionRule(charset=Charset(uppercase=True, lowercase=True, digits=True, symbols=True))
    assert not validate("café", rule)


def test_empty_charset_allows_any_character():
    rule = CompositionRule(length=3)
    assert validate("a é", rule)


def test_explain_never_contains_value():
    rule = CompositionRule(length=8, prefix="pre_", charset=Charset(lowercase=True))
    for value in ("topsecretvalue", "xxxxxxxx", "pre_SECR"):
        reason = rule.explain(value)
        assert reason is not None
        assert value not in reason


def test_random_values_match_rule():
    rng = random.Random(1234)
    alphabet = string.ascii_letters + string.digits + string.punctuation + " é"
    rules = [
        CompositionRule(length=12, prefix="tok_", charset=ALNUM),
        CompositionRule(length=6, charset=Charset(digits=True)),
        CompositionRule(prefix="A", charset=Charset(uppercase=True, symbols=True)),
        CompositionRule(),
    ]
    for rule in rules:
        base_length = rule.length or 8
        for _ in range(300):
            length = rng.choice([base_length - 1, base_length, base_length + 1, rng.randint(0, 20)])
            prefix = rule.prefix if rule.prefix and rng.random() < 0.7 else ""
            body_length = max(length - len(prefix), 0)
            if rng.random() < 0.5:
                pool = "".join(c for c in alphabet if _expected(c, CompositionRule(charset=rule.charset)))
            else:
                pool = alphabet
            value = prefix + "".join(rng.choice(pool) for _ in range(body_length))
            assert validate(value, rule) is _expected(value, rule), value


def test_validate_is_idempotent():
    rule = CompositionRule(length=5, prefix="x", charset=Charset(lowercase=True))
    for value in ("xabcd", "xabc", "yabcd", "xABCD"):
        results = {validate(value, rule) for _ in range(5)}
        assert len(results) == 1
        assert rule.validate(value) in results
