"""Tests for database SSL mode handling."""

import ssl

import pytest

from src.apex.core.db.engine import build_ssl_context

pytestmark = pytest.mark.unit


def test_disable_means_plain_connection():
    assert build_ssl_context("disable") is None


@pytest.mark.parametrize("mode", ["prefer", "require"])
def test_encrypt_without_verification(mode):
    context = build_ssl_context(mode)

    assert context.verify_mode == ssl.CERT_NONE
    assert context.check_hostname is False


def test_verify_ca_skips_hostname():
    context = build_ssl_context("verify-ca")

    assert context.verify_mode == ssl.CERT_REQUIRED
    assert context.check_hostname is False


def test_verify_full_checks_hostname():
    context = build_ssl_context("verify-full")

    assert context.verify_mode == ssl.CERT_REQUIRED
    assert context.check_hostname is True


def test_unknown_mode_rejected():
    with pytest.raises(ValueError, match="allow"):
        build_ssl_context("allow")
