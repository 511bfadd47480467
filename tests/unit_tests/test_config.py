import logging

import pytest

from klondike.config import LaunchConfig


def test_defaults_from_empty_environment():
    cfg = LaunchConfig.from_env({})
    assert cfg == LaunchConfig(seed=None, card_size=None, log_level=logging.WARNING, skip_title=False)


def test_reads_every_variable():
    cfg = LaunchConfig.from_env({
        "KLONDIKE_SEED": " 77 ",
        "KLONDIKE_CARD_SIZE": "large",
        "KLONDIKE_LOG_LEVEL": "debug",
        "KLONDIKE_SKIP_TITLE": "yes",
    })
    assert cfg.seed == 77
    assert cfg.card_size == "Large"
    assert cfg.log_level == logging.DEBUG
    assert cfg.skip_title is True


@pytest.mark.parametrize(
    "env",
    [
        {"KLONDIKE_SEED": "abc"},
        {"KLONDIKE_CARD_SIZE": "Huge"},
        {"KLONDIKE_LOG_LEVEL": "LOUD"},
    ],
)
def test_bad_values_raise(env):
    with pytest.raises(ValueError):
        LaunchConfig.from_env(env)


def test_same_seed_gives_same_shuffle():
    cfg = LaunchConfig(seed=5)
    a, b = list(range(52)), list(range(52))
    cfg.make_rng().shuffle(a)
    cfg.make_rng().shuffle(b)
    assert a == b
