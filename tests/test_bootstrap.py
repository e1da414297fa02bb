from __future__ import annotations

import pytest

from islandgate.islands.bootstrap import (
    read_consent_bootstrap,
    render_consent_bootstrap,
    render_deferred_bootstrap,
)


@pytest.mark.parametrize("flag", [True, False])
def test_bootstrap_serializes_flag_once(flag: bool) -> None:
    markup = render_deferred_bootstrap(flag)

    expected = "true" if flag else "false"
    assert markup.count("__INITIAL_ANALYTICS_CONSENT__") == 1
    assert f"window.__INITIAL_ANALYTICS_CONSENT__={expected};" in markup
    assert read_consent_bootstrap(markup) is flag


def test_bootstrap_precedes_deferred_script() -> None:
    markup = render_deferred_bootstrap(True, script_path="/deferred/islands.js?v=3&x=1")

    assert markup.index("__INITIAL_ANALYTICS_CONSENT__") < markup.index("data-deferred-islands")
    assert " defer " in markup
    assert 'src="/deferred/islands.js?v=3&amp;x=1"' in markup


def test_missing_bootstrap_reads_as_denied() -> None:
    assert read_consent_bootstrap("<main></main>") is False
    assert read_consent_bootstrap("window.__INITIAL_ANALYTICS_CONSENT__=maybe;") is False


def test_consent_bootstrap_alone() -> None:
    assert render_consent_bootstrap(False) == (
        "<script data-deferred-bootstrap>window.__INITIAL_ANALYTICS_CONSENT__=false;</script>"
    )
